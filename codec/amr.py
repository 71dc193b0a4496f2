import collections;
import multiprocessing as mp;
import re;
import sys;

import grammar.amr;
from codec.alignment import Alignments, UNALIGNED, \
    gorn_address_to_vertex, read_alignments;
from grammar.core import ParseError;
from graph import AMRGraph, GraphError, INSTANCE, LITERAL, concept_id;

#
# parse-tree nodes built by the graph actions, as opposed to the generic ones
# from the grammar engine
#
LabelNode = collections.namedtuple("LabelNode", ["label", "reentrant", "order"]);
ConceptNode = collections.namedtuple("ConceptNode", ["label", "index"]);
AlignmentNode = collections.namedtuple("AlignmentNode", ["index"]);
DescendentNode = collections.namedtuple("DescendentNode",
                                        ["label", "target", "inverse"]);

ID = re.compile(r"#\s::id\s(\S+).*");
TOKENS = re.compile(r"#\s::tok\s(.*)");
SENTENCE = re.compile(r"#\s::snt\s(.*)");
ROOT = re.compile(r"\(([a-z]+[0-9]*)\s");
INDEX = re.compile(r"~e\.([0-9]+)");

def normalize(relation):
    #
    # inverse roles point the other way; ':mod' counts as the inverse of
    # ':domain'.  every role ending in '-of' is an inverse, ':consist-of'
    # included.
    #
    if relation == ":mod":
        return ":domain", True;
    if relation.endswith("-of"):
        return relation[:-3], True;
    return relation, False;

class Actions(object):

    def __init__(self, graph, keep_inverse = False,
                 keep_relation_alignments = False):
        self.graph = graph;
        self.keep_inverse = keep_inverse;
        self.keep_relation_alignments = keep_relation_alignments;
        self.alignments = dict();
        self.reentrant_edges = set();
        self.seen = set();
        self.counts = dict();

    def align(self, key, index):
        if index != UNALIGNED:
            self.alignments.setdefault(key, set()).add(index);

    def add_edge(self, source, target, role, offset):
        #
        # a bracketed re-entrance of the enclosing variable would make for a
        # loop, which carries no information beyond the binding itself
        #
        if source == target: return None;
        try:
            return self.graph.add_edge(source, target, role);
        except GraphError as error:
            raise ParseError("cannot create edge {} -{}-> {}: {}"
                             "".format(source, role, target, error),
                             offset = offset) from error;

    def make_binding(self, input, start, end, elements):
        label = elements[0].text;
        reentrant = label in self.seen;
        self.seen.add(label);
        return LabelNode(label, reentrant, [label]);

    def make_ancestor(self, input, start, end, elements):
        binding, concept, children = elements[2], elements[3], elements[4];
        label = binding.label;
        self.graph.add_node(label, label = label);
        order = [label];
        if isinstance(concept, ConceptNode):
            id = concept_id(concept.label);
            self.add_edge(label, id, INSTANCE, start);
            self.align(label, concept.index);
            order.append(id);
        for child in children.elements:
            target = child.target;
            order.extend(target.order);
            if child.inverse and not self.keep_inverse:
                edge = self.add_edge(target.label, label, child.label, start);
            else:
                edge = self.add_edge(label, target.label, child.label, start);
            if target.reentrant and edge is not None:
                self.reentrant_edges.add(edge);
        return LabelNode(label, binding.reentrant, order);

    def make_descendent(self, input, start, end, elements):
        relation, alignment, target = \
            elements[0].text, elements[1], elements[3];
        label, inverse = normalize(relation);
        if self.keep_inverse: label = relation;
        if isinstance(alignment, AlignmentNode):
            if self.keep_relation_alignments:
                self.align(label, alignment.index);
            elif target.label not in self.alignments:
                self.align(target.label, alignment.index);
        return DescendentNode(label, target, inverse);

    def make_concept(self, input, start, end, elements):
        label = elements[0].text;
        self.graph.add_concept(label);
        alignment = elements[1];
        index = alignment.index \
            if isinstance(alignment, AlignmentNode) else UNALIGNED;
        return ConceptNode(label, index);

    def make_alignment(self, input, start, end, elements):
        match = INDEX.fullmatch(input[start:end]);
        return AlignmentNode(int(match.group(1)) if match else UNALIGNED);

    def make_node(self, elements, variable):
        label = elements[0].text;
        if variable:
            reentrant = label in self.seen;
            self.seen.add(label);
            self.graph.add_node(label, label = label);
        else:
            reentrant = False;
            if not label.startswith("\""): label = "\"{}\"".format(label);
            value = label;
            #
            # literals are not shared: repeated values get fresh nodes
            #
            if self.graph.find_node(label) is not None:
                self.counts[label] = self.counts.get(label, 0) + 1;
                label = "{}_{}".format(label, self.counts[label]);
            self.graph.add_node(label, label = value, type = LITERAL);
        alignment = elements[1];
        if isinstance(alignment, AlignmentNode):
            self.align(label, alignment.index);
        return LabelNode(label, reentrant, [label]);

    def make_var(self, input, start, end, elements):
        return self.make_node(elements, True);

    def make_constant(self, input, start, end, elements):
        return self.make_node(elements, False);

    def make_str(self, input, start, end, elements):
        return self.make_node(elements, False);

    def make_num(self, input, start, end, elements):
        return self.make_node(elements, False);

def amr_blocks(fp):
    #
    # blank lines separate graphs; blocks made up of comments only (e.g. the
    # file header of an AMR release) are skipped.
    #
    comments, lines = [], [];
    for line in fp:
        line = line.rstrip("\n\r");
        if len(line.strip()) == 0:
            if lines: yield comments, "\n".join(lines);
            comments, lines = [], [];
        elif line.lstrip().startswith("#") and not lines:
            comments.append(line.strip());
        else:
            lines.append(line.rstrip());
    if lines: yield comments, "\n".join(lines);

def metadata(comments):
    id = tokens = text = alignment = None;
    for line in comments:
        match = ID.fullmatch(line);
        if match is not None: id = match.group(1); continue;
        match = TOKENS.fullmatch(line);
        if match is not None: tokens = match.group(1).split(" "); continue;
        match = SENTENCE.fullmatch(line);
        if match is not None: text = match.group(1); continue;
        if line.startswith("# ::alignments"): alignment = line;
    return id, tokens, text, alignment;

def read_graph(id, amr, tokens, alignment = None, text = None,
               keep_inverse = False, keep_relation_alignments = False,
               quiet = False):
    amr = amr.strip();
    match = ROOT.search(amr.split("\n")[0]);
    if match is None:
        raise ValueError("read_graph(): graph #{}: no root variable in ‘{}’."
                         "".format(id, amr.split("\n")[0]));
    graph = AMRGraph(id, match.group(1));
    graph.input = text;
    actions = Actions(graph, keep_inverse, keep_relation_alignments);
    tree = grammar.amr.parse(amr, actions);
    graph.order = tree.order;
    alignments = actions.alignments;
    if not alignments:
        mapping = read_alignments(alignment, quiet = quiet);
        if not mapping:
            raise ValueError("read_graph(): graph #{}: "
                             "no (usable) alignments.".format(id));
        for token, addresses in mapping.items():
            for address in addresses:
                vertex = gorn_address_to_vertex(graph, address,
                                                actions.reentrant_edges,
                                                quiet = quiet);
                if vertex is not None:
                    alignments.setdefault(vertex, set()).add(token);
    if tokens is None: tokens = text.split() if text else [];
    graph.alignments = Alignments(graph, alignments, tokens);
    return graph;

def schedule(i, id, amr, tokens, alignment, text,
             keep_inverse, keep_relation_alignments, quiet):
    try:
        return read_graph(id, amr, tokens, alignment, text,
                          keep_inverse, keep_relation_alignments, quiet), None;
    except Exception as error:
        return None, "codec.amr.read(): ignoring graph #{}: {}" \
            "".format(id if id is not None else i, error);

def read(fp, keep_inverse = False, keep_relation_alignments = False,
         cores = 1, n = None, trace = 0, quiet = False):
    tasks = [];
    for i, (comments, amr) in enumerate(amr_blocks(fp)):
        if n is not None and i >= n: break;
        id, tokens, text, alignment = metadata(comments);
        if id is None: id = str(i);
        if trace > 1:
            print("codec.amr.read(): #{}: {}".format(id, amr),
                  file = sys.stderr);
        tasks.append((i, id, amr, tokens, alignment, text,
                      keep_inverse, keep_relation_alignments, quiet));
    if cores > 1 and len(tasks) > 1:
        with mp.Pool(cores) as pool:
            results = pool.starmap(schedule, tasks);
    else:
        results = (schedule(*task) for task in tasks);
    for graph, error in results:
        if error is not None:
            if not quiet: print(error, file = sys.stderr);
        else:
            yield graph;
