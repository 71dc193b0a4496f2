# -*- coding: utf-8; -*-

import collections;
import re;
import sys;

import numpy as np;

from graph import INSTANCE, SemanticGraph;

OP = re.compile(r":op[0-9]+");

def remove_names(corpus, trace = 0):
    #
    # the ':op' strings of a name node (the target of ':name') add nothing
    # once mentions have been collected.  the name node itself goes only
    # when nothing else hangs off it.
    #
    names = set();
    for graph in corpus.graphs:
        for edge in list(graph.edges):
            if edge.lab != ":name": continue;
            edges = graph.outgoing(edge.tgt);
            names.update(e.tgt for e in edges if OP.fullmatch(e.lab));
            if all(e.lab == INSTANCE or OP.fullmatch(e.lab) for e in edges):
                names.add(edge.tgt);
    corpus.remove_vertices(names);
    if trace:
        print("remove_names(): removed {} nodes.".format(len(names)),
              file = sys.stderr);
    return names;

def remove_concepts(corpus, trace = 0):
    types = dict();
    concepts = set();
    for graph in corpus.graphs:
        for edge in list(graph.edges):
            if edge.lab == INSTANCE:
                types[edge.src] = graph.find_node(edge.tgt).label;
        concepts.update(graph.concepts());
    corpus.remove_vertices(concepts);
    if trace:
        print("remove_concepts(): removed {} concepts; {} typed nodes."
              "".format(len(concepts), len(types)), file = sys.stderr);
    return types;

def choose(candidates):
    #
    # the heaviest candidate wins, unless a multi-word candidate weighs at
    # least the average: longer matches are more specific.
    #
    weights = np.array([candidate.weight for candidate in candidates]);
    multiwords = [i for i, candidate in enumerate(candidates)
                  if candidate.mention.is_multiword()];
    if multiwords:
        best = multiwords[int(np.argmax(weights[multiwords]))];
        if weights[best] >= np.mean(weights):
            return candidates[best];
    return candidates[int(np.argmax(weights))];

def disambiguate_candidates(corpus, trace = 0):
    n = 0;
    for vertex in sorted(corpus.candidates):
        candidates = corpus.get_candidates(vertex);
        if not candidates: continue;
        candidate = choose(candidates);
        corpus.choose_candidate(vertex, candidate);
        n += 1;
        if trace > 1:
            print("disambiguate_candidates(): {}: {}"
                  "".format(vertex, candidate), file = sys.stderr);
    return n;

def subsumers(corpus):
    #
    # nodes whose chosen meaning comes from a multi-word mention and which
    # have descendants, while the span still covers nodes other than them
    #
    result = [];
    for graph in corpus.graphs:
        for vertex in graph.variables():
            candidates = corpus.get_candidates(vertex);
            if not candidates or not candidates[0].mention.is_multiword():
                continue;
            if not graph.descendants(vertex): continue;
            span = candidates[0].mention.span;
            if graph.alignments.span_vertices(span) - {vertex}:
                result.append((graph, vertex));
    return result;

def collapse_multiwords(corpus, trace = 0):
    agenda = collections.deque(subsumers(corpus));
    n = 0;
    while agenda:
        graph, vertex = agenda.popleft();
        candidates = corpus.get_candidates(vertex);
        if not candidates: continue;
        candidate = candidates[0];
        subsumed = graph.alignments.span_vertices(candidate.mention.span) \
            - {vertex};
        weights = [c.weight for s in subsumed
                   for c in corpus.get_candidates(s)];
        maximum = max(weights) if weights else 0.0;
        if candidate.weight >= maximum:
            corpus.contract(graph, vertex, sorted(subsumed));
            agenda = collections.deque((g, vertex if v in subsumed else v)
                                       for g, v in agenda);
            n += 1;
            if trace > 1:
                print("collapse_multiwords(): {} absorbs {} ({})"
                      "".format(vertex, ", ".join(sorted(subsumed)),
                                candidate.mention.surface),
                      file = sys.stderr);
        elif trace > 1:
            print("collapse_multiwords(): rejected {} for {} ({} < {})"
                  "".format(candidate.mention.surface, vertex,
                            candidate.weight, maximum),
                  file = sys.stderr);
    return n;

def merge(corpus, types = None, trace = 0):
    result = SemanticGraph();
    for graph in corpus.graphs:
        for edge in sorted(graph.edges):
            for vertex in (edge.src, edge.tgt):
                if vertex in result: continue;
                result.add_node(vertex, label = graph.find_node(vertex).label,
                                source = graph.id);
                for mention in corpus.get_mentions(vertex):
                    result.add_mention(vertex, mention);
                candidates = corpus.get_candidates(vertex);
                if candidates:
                    result.set_meaning(vertex, candidates[0].meaning,
                                       candidates[0].weight);
                    result.add_mention(vertex, candidates[0].mention);
                if types is not None and vertex in types:
                    result.add_type(vertex, types[vertex]);
            result.add_edge(edge.src, edge.tgt, edge.lab);

    #
    # nodes folded away earlier point to their survivor, so that chains
    # sharing a member still end up in one node
    #
    replacements = dict();

    def resolve(vertex):
        while vertex in replacements: vertex = replacements[vertex];
        return vertex;

    def fold(survivor, members):
        members = [member for member in members if member != survivor];
        if not members: return;
        result.contract(survivor, members);
        for member in members: replacements[member] = survivor;

    for chain in corpus.chains:
        members = sorted({resolve(vertex) for vertex in chain.vertices()}
                         & set(result.nodes));
        if len(members) < 2: continue;
        survivor = max(members, key = lambda vertex: (result.weight(vertex),
                                                      -members.index(vertex)));
        fold(survivor, members);

    groups = dict();
    for vertex in sorted(result.nodes):
        meaning = result.meaning(vertex);
        if meaning is not None and meaning.ne:
            groups.setdefault(meaning.reference, []).append(vertex);
    for reference, members in sorted(groups.items()):
        fold(members[0], members);

    if trace:
        result.summary(stream = sys.stderr);
    return result;

def create(corpus, trace = 0):
    """Run the consolidation passes over the corpus in order and return the
    merged semantic graph."""
    remove_names(corpus, trace);
    types = remove_concepts(corpus, trace);
    disambiguate_candidates(corpus, trace);
    collapse_multiwords(corpus, trace);
    return merge(corpus, types, trace);
