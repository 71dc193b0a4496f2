# -*- coding: utf-8; -*-

import re;
import sys;

from corpus import Candidate, CoreferenceChain, Corpus, Mention;

#
# multi-word mentions span at least two and at most this many tokens
#
MAXIMUM_SPAN = 5;
PUNCTUATION = re.compile(r"[.?!;,:“\"”‘'’()\[\]{}«»…/\\&*+=<>|_~^`@#%$-]+");

def is_name(graph, vertex):
    if vertex is None: return False;
    for edge in graph.outgoing(vertex):
        if edge.lab == ":name": return True;
    return graph.concept(vertex) == "name";

def mention(graph, span):
    alignments = graph.alignments;
    head = alignments.span_head(span);
    surface = alignments.surface_form(span);
    return Mention(graph.id, span, surface,
                   lemma = alignments.lemma(span) or surface,
                   pos = alignments.part_of_speech(span) or "",
                   ne = is_name(graph, head)
                   or (alignments.ne_type(span) or "") not in {"", "O"},
                   type = (graph.concept(head) or "") if head else "");

def collect_mentions(graph, function_words = None):
    """Return (vertex, mention) pairs for the sentence graph: one single-word
    mention per token aligned to a vertex, plus multi-word mentions for
    spans headed by one vertex.  The vertex of a multi-word mention is the
    head of its span."""
    alignments = graph.alignments;
    if alignments is None: return [];
    result = [];
    for vertex, tokens in sorted(alignments.items()):
        for token in sorted(tokens):
            candidate = mention(graph, (token, token + 1));
            if function_words and candidate.lemma.lower() in function_words:
                continue;
            result.append((vertex, candidate));
    n = len(alignments.tokens);
    for start in range(n):
        for end in range(start + 2, min(start + MAXIMUM_SPAN, n) + 1):
            span = (start, end);
            head = alignments.span_head(span);
            if head is None: continue;
            if any(PUNCTUATION.fullmatch(token)
                   for token in alignments.tokens[start:end]):
                continue;
            candidate = mention(graph, span);
            if candidate.is_nominal() or candidate.ne:
                result.append((head, candidate));
    return result;

def collect_candidates(mentions, lookup, trace = 0):
    #
    # only nominal single words go to the lexicon; multi-word mentions were
    # restricted to nominal groups and names when they were collected
    #
    result = [];
    seen = set();
    for _, mention in mentions:
        if mention in seen: continue;
        seen.add(mention);
        if not mention.is_multiword() and not mention.is_nominal(): continue;
        for meaning, weight in lookup(mention):
            candidate = Candidate(mention, meaning, float(weight));
            if candidate not in result: result.append(candidate);
    if trace:
        print("collect_candidates(): {} candidates for {} mentions."
              "".format(len(result), len(seen)), file = sys.stderr);
    return result;

def prepare(graphs, lookup = None, coreference = None, annotate = None,
            function_words = None, trace = 0, quiet = False):
    """Turn parsed sentence graphs into a corpus ready for consolidation:
    qualify node identifiers, collect mentions and dictionary candidates,
    and resolve coreference chains through the given callables."""
    graphs = [graph.qualify() for graph in graphs];
    if annotate is not None:
        for graph in graphs: annotate(graph);
    mentions = [];
    for graph in graphs:
        mentions.extend(collect_mentions(graph, function_words));
    if trace:
        print("prepare(): {} graphs; {} mentions."
              "".format(len(graphs), len(mentions)), file = sys.stderr);
    candidates = collect_candidates(mentions, lookup, trace) \
        if lookup is not None else [];
    chains = [];
    if coreference is not None:
        for chain in coreference(graphs):
            if not isinstance(chain, CoreferenceChain):
                chain = CoreferenceChain(vertices = chain);
            chains.append(chain);
    return Corpus(graphs, mentions, candidates, chains, quiet = quiet);
