import io;

import validate.core;
from codec.amr import read_graph;
from corpus import Meaning;
from graph import Edge, SemanticGraph;

def check(graph, actions = validate.core.VALIDATIONS):
    stream = io.StringIO();
    n = validate.core.test(graph, actions, stream = stream);
    return n, stream.getvalue().splitlines();

def test_clean_graph(example):
    amr, tokens = example;
    assert check(read_graph("s", amr, tokens)) == (0, []);

def test_sentence_graph_errors(example):
    amr, tokens = example;
    graph = read_graph("s", amr, tokens);
    graph.store_edge(Edge("b", "b", ":ARG1"), check = False);
    graph.store_edge(Edge("b", "w", ":ARG2"), check = False);
    graph.alignments.table["zz"] = {9};
    n, messages = check(graph);
    assert n == 4;
    assert "validate(): [E] graph #s; edge b -:ARG1-> b: self loop." \
        in messages;
    assert "validate(): [E] graph #s: cyclic sentence graph." in messages;
    assert "validate(): [E] graph #s; node #zz: alignment for unknown node." \
        in messages;
    assert "validate(): [E] graph #s; node #zz: invalid token index 9." \
        in messages;
    n, messages = check(graph, {"root", "alignments"});
    assert n == 2;

def test_missing_root_and_id(example):
    amr, tokens = example;
    graph = read_graph("", amr, tokens);
    graph.root = "nowhere";
    n, messages = check(graph, {"root"});
    assert n == 2;
    assert messages[0].endswith("missing or invalid ‘id’ property.");
    assert messages[1].endswith("missing root nowhere.");

def test_stale_edges():
    graph = SemanticGraph();
    graph.add_node("a");
    graph.add_node("b");
    edge = graph.add_edge("a", "b", ":ARG0");
    graph.edges.discard(edge);
    graph.edges.add(Edge("a", "c", ":ARG1"));
    n, messages = check(graph, {"edges"});
    assert n == 3;
    assert "validate(): [E] graph #global; edge a -:ARG1-> c: " \
        "invalid target." in messages;

def test_semantic_graph_meanings():
    graph = SemanticGraph();
    for id in "abc": graph.add_node(id);
    graph.add_edge("a", "b", ":ARG0");
    paris = Meaning("Q90", "Paris", ne = True);
    graph.set_meaning("a", paris, 0.9);
    graph.set_meaning("c", paris, 0.8);
    graph.meanings["x"] = Meaning("Q1");
    n, messages = check(graph);
    assert n == 2;
    assert "validate(): [E] graph #global; node #x: " \
        "meaning for unknown node." in messages;
    assert "validate(): [W] graph #global; node #c: " \
        "named entity ‘Q90’ also on node #a." in messages;
