# -*- coding: utf-8; -*-

from datetime import datetime;
import html;
import sys;

import analyzer;

#
# node types, used for rendering: variables (and literals) of the sentence
# graphs, their concepts, and the vertices of the consolidated graph.
#
VARIABLE = 1;
CONCEPT = 0;
LITERAL = 2;

INSTANCE = ":instance";

class GraphError(ValueError):
    pass;

class Node(object):

    def __init__(self, id, label = None, type = VARIABLE):
        self.id = id;
        self.type = type;
        self.label = label;
        self.incoming_edges = set();
        self.outgoing_edges = set();

    def encode(self):
        json = {"id": self.id};
        if self.label is not None and self.label != self.id:
            json["label"] = self.label;
        return json;

    def dot(self, stream, label = None):
        shapes = ["box", "oval", "plaintext"];
        if label is None: label = self.label if self.label else self.id;
        print("  \"{}\" [ shape={}, label=<{}> ];"
              "".format(self.id, shapes[self.type],
                        html.escape(str(label), False)),
              file = stream);

    def __key(self):
        return self.id

    def __eq__(self, other):
        return self.__key() == other.__key()

    def __lt__(self, other):
        return self.__key() < other.__key()

    def __hash__(self):
        return hash(self.__key())

class Edge(object):

    def __init__(self, src, tgt, lab):
        self.src = src;
        self.tgt = tgt;
        self.lab = lab;

    def is_loop(self):
        return self.src == self.tgt

    def encode(self):
        return {"source": self.src, "target": self.tgt, "label": self.lab};

    def dot(self, stream):
        print("  \"{}\" -> \"{}\" [ label=\"{}\" ];"
              "".format(self.src, self.tgt, self.lab),
              file = stream);

    def __key(self):
        return self.tgt, self.src, self.lab

    def __eq__(self, other):
        return self.__key() == other.__key()

    def __lt__(self, other):
        return self.__key() < other.__key()

    def __hash__(self):
        return hash(self.__key())

    def __repr__(self):
        return "{} -{}-> {}".format(self.src, self.lab, self.tgt);

class Graph(object):

    def __init__(self, id, acyclic = False):
        self.id = id;
        self.time = datetime.now();
        self.input = None;
        self.nodes = dict();
        self.edges = set();
        self.acyclic = acyclic;

    def __contains__(self, id):
        return id in self.nodes;

    def add_node(self, id, label = None, type = VARIABLE):
        node = self.nodes.get(id);
        if node is None:
            node = self.nodes[id] = Node(id, label = label, type = type);
        return node;

    def find_node(self, id):
        return self.nodes.get(id);

    def add_edge(self, src, tgt, lab):
        return self.store_edge(Edge(src, tgt, lab));

    def store_edge(self, edge, check = True):
        source = self.find_node(edge.src);
        if source is None:
            raise GraphError("Graph.add_edge(): graph #{}: "
                             "invalid source node {}."
                             "".format(self.id, edge.src));
        target = self.find_node(edge.tgt);
        if target is None:
            raise GraphError("Graph.add_edge(): graph #{}: "
                             "invalid target node {}."
                             "".format(self.id, edge.tgt));
        if edge in self.edges:
            return edge;
        if check and self.acyclic \
           and (edge.is_loop() or analyzer.reachable(self, edge.tgt, edge.src)):
            raise GraphError("Graph.add_edge(): graph #{}: "
                             "edge {} would introduce a cycle."
                             "".format(self.id, edge));
        self.edges.add(edge);
        source.outgoing_edges.add(edge);
        target.incoming_edges.add(edge);
        return edge;

    def remove_edge(self, edge):
        self.edges.discard(edge);
        source = self.find_node(edge.src);
        if source is not None: source.outgoing_edges.discard(edge);
        target = self.find_node(edge.tgt);
        if target is not None: target.incoming_edges.discard(edge);

    def outgoing(self, id, instances = True):
        node = self.find_node(id);
        if node is None: return [];
        return sorted(edge for edge in node.outgoing_edges
                      if instances or edge.lab != INSTANCE);

    def incoming(self, id):
        node = self.find_node(id);
        return sorted(node.incoming_edges) if node is not None else [];

    def remove_node(self, id):
        node = self.find_node(id);
        if node is None: return;
        for edge in list(node.incoming_edges | node.outgoing_edges):
            self.remove_edge(edge);
        del self.nodes[id];

    def remove_nodes(self, ids):
        for id in list(ids):
            self.remove_node(id);

    def rename_node(self, old, new):
        node = self.find_node(old);
        if node is None:
            raise GraphError("Graph.rename_node(): graph #{}: "
                             "invalid node {}.".format(self.id, old));
        if old == new: return node;
        if new in self.nodes:
            raise GraphError("Graph.rename_node(): graph #{}: "
                             "node {} exists already.".format(self.id, new));
        edges = list(node.incoming_edges | node.outgoing_edges);
        for edge in edges:
            self.remove_edge(edge);
        del self.nodes[old];
        node.id = new;
        self.nodes[new] = node;
        for edge in edges:
            self.store_edge(Edge(new if edge.src == old else edge.src,
                                 new if edge.tgt == old else edge.tgt,
                                 edge.lab), check = False);
        return node;

    def contract(self, v, contracted):
        #
        # fold every node in .contracted. into .v.: edges incident on one of
        # them are redirected to .v., dropping those that would end up as a
        # loop on .v.; the folded nodes disappear from the graph.
        #
        survivor = self.find_node(v);
        if survivor is None:
            raise GraphError("Graph.contract(): graph #{}: "
                             "invalid node {}.".format(self.id, v));
        contracted = list(contracted);
        if v in contracted:
            raise GraphError("Graph.contract(): graph #{}: "
                             "cannot contract node {} into itself."
                             "".format(self.id, v));
        for c in contracted:
            if c not in self.nodes:
                raise GraphError("Graph.contract(): graph #{}: "
                                 "invalid node {}.".format(self.id, c));
        members = set(contracted);
        members.add(v);
        for c in contracted:
            node = self.nodes[c];
            for edge in list(node.incoming_edges | node.outgoing_edges):
                self.remove_edge(edge);
                source = v if edge.src in members else edge.src;
                target = v if edge.tgt in members else edge.tgt;
                if source != target:
                    self.store_edge(Edge(source, target, edge.lab),
                                    check = False);
            self.absorb(survivor, node);
            del self.nodes[c];
        return survivor;

    def absorb(self, survivor, node):
        pass;

    def descendants(self, id):
        return analyzer.descendants(self, id);

    def components(self, nodes = None):
        return analyzer.components(self, nodes);

    def encode(self):
        json = {"id": self.id};
        if self.time is not None:
            json["time"] = self.time.strftime("%Y-%m-%d");
        if self.input:
            json["input"] = self.input;
        if self.nodes:
            json["nodes"] = [node.encode() for node in self.nodes.values()];
        if self.edges:
            json["edges"] = [edge.encode() for edge in sorted(self.edges)];
        return json;

    def dot(self, stream):
        print("digraph \"{}\" {{".format(self.id), file = stream);
        for node in self.nodes.values():
            node.dot(stream, self.label(node));
        for edge in sorted(self.edges):
            edge.dot(stream);
        print("}", file = stream);

    def label(self, node):
        return node.label if node.label else node.id;

def concept_id(label):
    #
    # concepts share a namespace with variables in the PENMAN notation (think
    # of '(i / i)'), hence concept nodes carry a distinct identifier.
    #
    return "/" + label;

class AMRGraph(Graph):

    def __init__(self, id, root):
        super().__init__(id, acyclic = True);
        self.root = root;
        self.order = [];
        self.alignments = None;
        self.add_node(root, label = root);

    def add_concept(self, label):
        return self.add_node(concept_id(label), label = label, type = CONCEPT);

    def is_concept(self, id):
        node = self.find_node(id);
        return node is not None and node.type == CONCEPT;

    def concept(self, id):
        for edge in self.outgoing(id):
            if edge.lab == INSTANCE:
                return self.nodes[edge.tgt].label;
        return None;

    def concepts(self):
        return [node.id for node in self.nodes.values()
                if node.type == CONCEPT];

    def variables(self):
        return [node.id for node in self.nodes.values()
                if node.type != CONCEPT];

    def depths(self):
        return analyzer.depths(self, self.root);

    def depth(self, id):
        return self.depths().get(id);

    def qualify(self):
        #
        # make node identifiers unique across sentences, prefixing them with
        # the sentence identifier
        #
        for id in list(self.nodes):
            self.rename_node(id, "{}_{}".format(self.id, id));
        return self;

    def rename_node(self, old, new):
        node = super().rename_node(old, new);
        if self.root == old: self.root = new;
        self.order = [new if id == old else id for id in self.order];
        if self.alignments is not None:
            self.alignments.rename_node(old, new);
        return node;

    def remove_node(self, id):
        super().remove_node(id);
        if self.alignments is not None:
            self.alignments.remove_node(id);

    def absorb(self, survivor, node):
        if self.alignments is not None:
            self.alignments.contract(survivor.id, node.id);

    def encode(self):
        json = super().encode();
        json["root"] = self.root;
        if self.alignments is not None:
            json["tokens"] = self.alignments.tokens;
            json["alignments"] \
                = {id: sorted(tokens)
                   for id, tokens in sorted(self.alignments.items())};
        return json;

class SemanticGraph(Graph):

    def __init__(self, id = "global"):
        super().__init__(id);
        self.meanings = dict();
        self.weights = dict();
        self.mentions = dict();
        self.types = dict();
        self.sources = dict();

    def add_node(self, id, label = None, type = VARIABLE, source = None):
        node = super().add_node(id, label, type);
        if source is not None:
            self.sources.setdefault(id, set()).add(source);
        return node;

    def add_mention(self, id, mention):
        self.mentions.setdefault(id, set()).add(mention);

    def add_type(self, id, type):
        self.types.setdefault(id, set()).add(type);

    def set_meaning(self, id, meaning, weight = 0.0):
        self.meanings[id] = meaning;
        self.weights[id] = weight;

    def meaning(self, id):
        return self.meanings.get(id);

    def weight(self, id):
        return self.weights.get(id, 0.0);

    def remove_node(self, id):
        super().remove_node(id);
        for table in (self.meanings, self.weights, self.mentions,
                      self.types, self.sources):
            table.pop(id, None);

    def absorb(self, survivor, node):
        v, c = survivor.id, node.id;
        for table in (self.mentions, self.types, self.sources):
            values = table.pop(c, None);
            if values: table.setdefault(v, set()).update(values);
        meaning = self.meanings.pop(c, None);
        weight = self.weights.pop(c, 0.0);
        if v not in self.meanings and meaning is not None:
            self.set_meaning(v, meaning, weight);

    def label(self, node):
        meaning = self.meaning(node.id);
        if meaning is not None:
            return "{} ({})".format(meaning.label, meaning.reference);
        types = self.types.get(node.id);
        if types: return "/".join(sorted(types));
        return node.id;

    def encode(self):
        json = super().encode();
        for node in json.get("nodes", []):
            id = node["id"];
            meaning = self.meaning(id);
            if meaning is not None:
                node["meaning"] = meaning.encode();
                node["weight"] = self.weight(id);
            if self.mentions.get(id):
                node["mentions"] = [mention.encode() for mention
                                    in sorted(self.mentions[id])];
            if self.types.get(id):
                node["types"] = sorted(self.types[id]);
            if self.sources.get(id):
                node["sources"] = sorted(self.sources[id]);
        return json;

    def summary(self, stream = sys.stderr):
        n = len(self.components());
        print("SemanticGraph.summary(): graph #{}: {} nodes; {} edges; "
              "{} components; {} with meaning."
              "".format(self.id, len(self.nodes), len(self.edges), n,
                        len(self.meanings)),
              file = stream);
        return n;
