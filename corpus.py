# -*- coding: utf-8; -*-

import sys;

class Meaning(object):

    def __init__(self, reference, label = None, ne = False):
        self.reference = reference;
        self.label = label if label is not None else reference;
        self.ne = ne;

    def encode(self):
        json = {"reference": self.reference, "label": self.label};
        if self.ne: json["ne"] = True;
        return json;

    def __key(self):
        return self.reference

    def __eq__(self, other):
        return self.__key() == other.__key()

    def __lt__(self, other):
        return self.__key() < other.__key()

    def __hash__(self):
        return hash(self.__key())

    def __repr__(self):
        return "<{}>".format(self.reference);

class Mention(object):

    def __init__(self, context, span, surface = None, lemma = None,
                 pos = "", ne = False, type = ""):
        self.context = context;
        self.span = tuple(span);
        self.surface = surface;
        self.lemma = lemma if lemma is not None else surface;
        self.pos = pos;
        self.ne = ne;
        self.type = type;

    def is_multiword(self):
        return self.span[1] - self.span[0] > 1;

    def is_nominal(self):
        #
        # without part-of-speech information, everything counts as nominal;
        # coordinations like 'salt and pepper' end in a noun, too.
        #
        if not self.pos: return True;
        if self.is_multiword() and self.pos.endswith("CC"): return True;
        return self.pos.startswith("N");

    def encode(self):
        json = {"context": self.context, "span": list(self.span),
                "surface": self.surface};
        if self.lemma != self.surface: json["lemma"] = self.lemma;
        if self.pos: json["pos"] = self.pos;
        if self.ne: json["ne"] = True;
        if self.type: json["type"] = self.type;
        return json;

    def __key(self):
        return self.context, self.span

    def __eq__(self, other):
        return self.__key() == other.__key()

    def __lt__(self, other):
        return self.__key() < other.__key()

    def __hash__(self):
        return hash(self.__key())

    def __repr__(self):
        return "{}[{}:{}] ‘{}’".format(self.context, self.span[0],
                                        self.span[1], self.surface);

class Candidate(object):

    def __init__(self, mention, meaning, weight = 0.0):
        self.mention = mention;
        self.meaning = meaning;
        self.weight = weight;

    def __key(self):
        return self.mention, self.meaning

    def __eq__(self, other):
        return self.__key() == other.__key()

    def __hash__(self):
        return hash(self.__key())

    def __repr__(self):
        return "{} -> {} ({})".format(self.mention, self.meaning, self.weight);

class CoreferenceChain(object):

    def __init__(self, vertices = None, mentions = None):
        self.mentions = dict();
        for vertex in vertices or []:
            self.mentions.setdefault(vertex, set());
        for vertex, mention in mentions or []:
            self.mentions.setdefault(vertex, set()).add(mention);

    def vertices(self):
        return list(self.mentions);

    def size(self):
        return len(self.mentions);

    def __contains__(self, vertex):
        return vertex in self.mentions;

    def remove(self, vertex):
        self.mentions.pop(vertex, None);

    def replace(self, old, new):
        mentions = self.mentions.pop(old, None);
        if mentions is not None:
            self.mentions.setdefault(new, set()).update(mentions);

class Corpus(object):

    def __init__(self, graphs, mentions = None, candidates = None,
                 chains = None, quiet = False):
        self.graphs = list(graphs);
        self.owner = dict();
        for graph in self.graphs:
            for id in graph.nodes:
                if id in self.owner:
                    raise ValueError("Corpus(): node {} occurs in graphs #{} "
                                     "and #{}.".format(id, self.owner[id].id,
                                                       graph.id));
                self.owner[id] = graph;
        self.contexts = {graph.id: graph for graph in self.graphs};
        self.mentions = dict();
        for vertex, mention in mentions or []:
            self.mentions.setdefault(vertex, set()).add(mention);
        self.candidates = dict();
        for candidate in candidates or []:
            self.attach(candidate, quiet = quiet);
        self.chains = list(chains or []);
        for chain in self.chains:
            for vertex in chain.vertices():
                if vertex not in self.owner:
                    raise ValueError("Corpus(): coreference chain with "
                                     "unknown node {}.".format(vertex));

    def attach(self, candidate, quiet = False):
        #
        # candidates go to the top node among those aligned to their span
        #
        mention = candidate.mention;
        graph = self.contexts.get(mention.context);
        head = graph.alignments.span_head(mention.span) \
            if graph is not None and graph.alignments is not None else None;
        if head is None:
            if not quiet:
                print("Corpus.attach(): no node for {}; ignoring candidate."
                      "".format(mention), file = sys.stderr);
            return None;
        bucket = self.candidates.setdefault(head, []);
        if candidate not in bucket: bucket.append(candidate);
        return head;

    def graph(self, vertex):
        return self.owner.get(vertex);

    def vertices(self):
        return list(self.owner);

    def get_mentions(self, vertex):
        return self.mentions.get(vertex, set());

    def get_candidates(self, vertex):
        return self.candidates.get(vertex, []);

    def choose_candidate(self, vertex, candidate):
        if candidate not in self.get_candidates(vertex):
            raise ValueError("Corpus.choose_candidate(): {} is not a "
                             "candidate of node {}.".format(candidate, vertex));
        self.candidates[vertex] = [candidate];

    def remove_vertices(self, vertices):
        vertices = set(vertices);
        for vertex in vertices:
            graph = self.owner.pop(vertex, None);
            if graph is not None: graph.remove_node(vertex);
            self.mentions.pop(vertex, None);
            self.candidates.pop(vertex, None);
            for chain in self.chains: chain.remove(vertex);
        self.chains = [chain for chain in self.chains if chain.size() > 0];

    def contract(self, graph, v, contracted):
        contracted = list(contracted);
        if v not in graph:
            raise ValueError("Corpus.contract(): node {} is not in graph #{}."
                             "".format(v, graph.id));
        for c in contracted:
            if c == v or self.owner.get(c) is not graph:
                raise ValueError("Corpus.contract(): cannot contract {} into "
                                 "{} in graph #{}.".format(c, v, graph.id));
        graph.contract(v, contracted);
        for c in contracted:
            del self.owner[c];
            mentions = self.mentions.pop(c, None);
            if mentions: self.mentions.setdefault(v, set()).update(mentions);
            candidates = self.candidates.pop(c, None);
            if candidates and not self.candidates.get(v):
                self.candidates[v] = candidates;
            for chain in self.chains: chain.replace(c, v);
