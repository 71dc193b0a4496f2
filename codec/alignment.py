import re;
import sys;

from graph import INSTANCE;

ALIGNMENTS = re.compile(r"#\s::alignments\s([^:\n]+).*");
UNALIGNED = -1;

def alignment_items(line):
    match = ALIGNMENTS.fullmatch(line.strip()) if line else None;
    if match is None: return None;
    return match.group(1).split();

def read_alignments_format1(line):
    #
    # ISI-style alignments, e.g. '3-1.2.r 4-1', pairing one token with one
    # Gorn address per item; 'r' stands for the root index 0.  anything that
    # does not fit yields an empty mapping, so the caller can try format 2.
    #
    items = alignment_items(line);
    if not items: return dict();
    result = dict();
    try:
        for item in items:
            token, address = item.split("-");
            address = tuple(0 if index == "r" else int(index)
                            for index in address.split("."));
            token = int(token);
            bucket = result.setdefault(token, []);
            if address not in bucket: bucket.append(address);
    except ValueError:
        return dict();
    return result;

def read_alignments_format2(line, quiet = False):
    #
    # JAMR-style alignments, e.g. '2-4|0.1+0.1.0+0.1.1', pairing a token span
    # with all addresses it covers.  spans over several tokens distribute the
    # addresses over tokens: leading surplus addresses are governors (say the
    # name node above the ops of a multi-word name), shared by all tokens.
    #
    items = alignment_items(line);
    if not items: return dict();
    result = dict();

    def add(token, address):
        bucket = result.setdefault(token, []);
        if address not in bucket: bucket.append(address);

    try:
        for item in items:
            span, addresses = item.split("|");
            start, end = (int(index) for index in span.split("-"));
            addresses = [tuple(0 if index == "r" else int(index)
                               for index in address.split("."))
                         for address in addresses.split("+")];
            n = end - start;
            if n == 1:
                for address in addresses: add(start, address);
            elif len(addresses) > n:
                k = len(addresses) - n;
                for i in range(n):
                    add(start + i, addresses[i + k]);
                    for governor in addresses[:k]: add(start + i, governor);
            elif not quiet:
                print("read_alignments_format2(): "
                      "cannot distribute {} over {} tokens."
                      "".format(item, n), file = sys.stderr);
    except ValueError:
        return dict();
    return result;

def read_alignments(line, quiet = False):
    return read_alignments_format1(line) \
        or read_alignments_format2(line, quiet = quiet);

def gorn_address_to_vertex(graph, address, reentrant = None, quiet = False):
    #
    # walk down from the root; the first index addresses the root itself.  at
    # each step, children (ignoring concepts and re-entrant edges) are ordered
    # by their first occurrence in the bracketed notation after the parent,
    # which accommodates variables that occur more than once.
    #
    if reentrant is None: reentrant = set();
    order = graph.order;
    current = graph.root;
    try:
        for index in address[1:]:
            position = order.index(current);
            children = [edge.tgt for edge in graph.outgoing(current)
                        if edge.lab != INSTANCE and edge not in reentrant];

            def occurrence(child):
                return min(i for i in range(position + 1, len(order))
                           if order[i] == child);

            children.sort(key = occurrence);
            if index < 0: raise IndexError(index);
            current = children[index];
    except (ValueError, IndexError) as error:
        if not quiet:
            print("gorn_address_to_vertex(): graph #{}: "
                  "ignoring address {} ({})."
                  "".format(graph.id, ".".join(str(i) for i in address),
                            error),
                  file = sys.stderr);
        return None;
    return current;

class Alignments(object):

    def __init__(self, graph, alignments, tokens):
        self.graph = graph;
        self.tokens = list(tokens);
        n = len(self.tokens);
        self.lemmas = list(self.tokens);
        self.pos = [""] * n;
        self.ne = [""] * n;
        self.table = dict();
        #
        # unaligned nodes inherit the alignment of the first aligned node on
        # a chain of single-child descendants (not counting concepts)
        #
        for id in graph.variables():
            current, seen = id, set();
            while current not in alignments and current not in seen:
                seen.add(current);
                edges = graph.outgoing(current, instances = False);
                if len(edges) != 1: break;
                current = edges[0].tgt;
            if current in alignments:
                tokens = {token for token in alignments[current]
                          if 0 <= token < n};
                if tokens: self.table[id] = tokens;

    def items(self):
        return self.table.items();

    def __contains__(self, id):
        return id in self.table;

    def aligned(self, id):
        return self.table.get(id, set());

    def aligned_vertices(self, token):
        return {id for id, tokens in self.table.items() if token in tokens};

    def span_vertices(self, span):
        start, end = span;
        return {id for id, tokens in self.table.items()
                if any(start <= token < end for token in tokens)};

    def span_head(self, span):
        vertices = self.span_vertices(span);
        if not vertices: return None;
        if len(vertices) == 1: return next(iter(vertices));
        if len(self.graph.components(vertices)) != 1: return None;
        depths = self.graph.depths();
        top = min(vertices,
                  key = lambda id: (depths.get(id, float("inf")), id));
        if not vertices - {top} <= self.graph.descendants(top): return None;
        return top;

    def head_tokens(self, span):
        head = self.span_head(span);
        if head is None: return set();
        start, end = span;
        return {token for token in self.aligned(head) if start <= token < end};

    def surface_form(self, span):
        start, end = span;
        return " ".join(self.tokens[start:end]);

    def lemma(self, span):
        #
        # the head keeps its inflected form in multi-word spans ('rolling
        # stones' rather than 'roll stone')
        #
        start, end = span;
        if end - start == 1: return self.lemmas[start];
        if self.span_head(span) is None: return None;
        heads = self.head_tokens(span);
        return " ".join(self.tokens[i] if i in heads else self.lemmas[i]
                        for i in range(start, end));

    def head_token(self, span):
        heads = self.head_tokens(span);
        return min(heads) if heads else None;

    def part_of_speech(self, span):
        token = self.head_token(span);
        return self.pos[token] if token is not None else None;

    def ne_type(self, span):
        token = self.head_token(span);
        return self.ne[token] if token is not None else None;

    def annotate(self, token, lemma = None, pos = None, ne = None):
        if lemma is not None: self.lemmas[token] = lemma;
        if pos is not None: self.pos[token] = pos;
        if ne is not None: self.ne[token] = ne;

    def rename_node(self, old, new):
        if old in self.table:
            self.table[new] = self.table.pop(old);

    def remove_node(self, id):
        self.table.pop(id, None);

    def contract(self, v, c):
        tokens = self.table.pop(c, None);
        if tokens: self.table.setdefault(v, set()).update(tokens);
