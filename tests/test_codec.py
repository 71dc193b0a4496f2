import io;

import pytest;

import codec.amr;
import grammar.amr;
from codec.alignment import gorn_address_to_vertex, read_alignments, \
    read_alignments_format1, read_alignments_format2;
from codec.amr import Actions, amr_blocks, read_graph;
from grammar.core import ParseError;
from graph import AMRGraph, Edge, INSTANCE;

def relations(graph):
    return {(edge.src, edge.lab, edge.tgt) for edge in graph.edges
            if edge.lab != INSTANCE};

def build(input, **options):
    graph = AMRGraph("test", input[1:].split()[0]);
    actions = Actions(graph, **options);
    tree = grammar.amr.parse(input, actions);
    graph.order = tree.order;
    return graph, actions, tree;

def test_end_to_end(example):
    amr, tokens = example;
    graph = read_graph("s", amr, tokens);
    assert set(graph.variables()) == {"w", "b", "g"};
    assert relations(graph) == {("w", ":ARG0", "b"), ("w", ":ARG1", "g"),
                                ("g", ":ARG0", "b")};
    assert graph.concept("w") == "want-01";
    assert graph.concept("g") == "go-01";
    assert graph.alignments.aligned("b") == {0};
    assert graph.alignments.aligned("g") == {2};
    assert graph.alignments.aligned("w") == set();
    assert graph.root == "w";
    assert graph.order == ["w", "/want-01", "b", "/boy", "g", "/go-01", "b"];

def test_reentrant_reference(example):
    graph, actions, tree = build(example[0]);
    assert actions.reentrant_edges == {Edge("g", "b", ":ARG0")};
    assert tree.label == "w" and not tree.reentrant;

def test_reentrant_ancestor():
    ancestors = [];

    class Recording(Actions):

        def make_ancestor(self, *arguments):
            node = super().make_ancestor(*arguments);
            ancestors.append(node);
            return node;

    input = "(a / want-01 :ARG0 (b / boy) :ARG1 (a :ARG1 (c / play-01)))";
    graph = AMRGraph("test", "a");
    grammar.amr.parse(input, Recording(graph));
    assert [node.reentrant for node in ancestors if node.label == "a"] \
        == [True, False];
    assert set(graph.variables()) == {"a", "b", "c"};
    assert relations(graph) == {("a", ":ARG0", "b"), ("a", ":ARG1", "c")};
    assert graph.concept("a") == "want-01";

def test_inverse_roles():
    graph, _, _ = build("(b / boy :ARG0-of (w / want-01))");
    assert relations(graph) == {("w", ":ARG0", "b")};
    graph, _, _ = build("(b / boy :ARG0-of (w / want-01))",
                        keep_inverse = True);
    assert relations(graph) == {("b", ":ARG0-of", "w")};

def test_mod_is_inverse_of_domain():
    graph, _, _ = build("(h / house :mod (b / big))");
    assert relations(graph) == {("b", ":domain", "h")};
    graph, _, _ = build("(h / house :mod (b / big))", keep_inverse = True);
    assert relations(graph) == {("h", ":mod", "b")};

def test_of_suffix_is_always_inverse():
    input = "(t / team :consist-of (p / person) :prep-out-of (h / house))";
    graph, _, _ = build(input);
    assert relations(graph) == {("p", ":consist", "t"),
                                ("h", ":prep-out", "t")};
    graph, _, _ = build(input, keep_inverse = True);
    assert relations(graph) == {("t", ":consist-of", "p"),
                                ("t", ":prep-out-of", "h")};

def test_literals():
    graph, _, _ = build("(m / move-01 :mode imperative :polarity - "
                        ":op1 - :quant 3 :name \"Paris\")");
    assert relations(graph) == {("m", ":mode", "\"imperative\""),
                                ("m", ":polarity", "\"-\""),
                                ("m", ":op1", "\"-\"_1"),
                                ("m", ":quant", "\"3\""),
                                ("m", ":name", "\"Paris\"")};
    assert graph.find_node("\"-\"_1").label == "\"-\"";

def test_concepts_do_not_clash_with_variables():
    graph, _, _ = build("(i / i :ARG0-of (l / like-01 :ARG1 (i2 / i)))");
    assert set(graph.concepts()) == {"/i", "/like-01"};
    assert graph.concept("i") == "i" and graph.concept("i2") == "i";
    assert ("l", ":ARG0", "i") in relations(graph);

def test_relation_alignments():
    input = "(w / want-01 :ARG0~e.1 (b / boy))";
    graph = read_graph("s", input, ["the", "boy", "wants"]);
    assert graph.alignments.aligned("b") == {1};
    _, actions, _ = build(input, keep_relation_alignments = True);
    assert actions.alignments == {":ARG0": {1}};
    graph = read_graph("s", "(w / want-01 :ARG0~e.1 (b / boy~e.0))",
                       ["boy", "the", "wants"]);
    assert graph.alignments.aligned("b") == {0};

def test_malformed_alignment_is_unaligned():
    graph = read_graph("s", "(w / want-01~e.0 :ARG0 (b / boy~x))",
                       ["wants", "boy"]);
    assert graph.alignments.aligned("w") == {0};
    assert graph.alignments.aligned("b") == set();

def test_cycles_are_fatal():
    with pytest.raises(ParseError) as info:
        build("(a / x :ARG0 (b / y :ARG0 a))");
    assert "cycle" in str(info.value);

def test_missing_root():
    with pytest.raises(ValueError):
        read_graph("s", "x / y", []);

def test_amr_blocks(bank):
    blocks = list(amr_blocks(bank));
    assert len(blocks) == 4;
    comments, amr = blocks[0];
    assert comments[0].startswith("# ::id s1");
    assert amr.startswith("(w / want-01\n");

def test_read(bank, capsys):
    graphs = list(codec.amr.read(bank));
    assert [graph.id for graph in graphs] == ["s1", "s2", "s4"];
    assert "codec.amr.read(): ignoring graph #s3" in capsys.readouterr().err;
    s1, s2, s4 = graphs;
    assert s1.input == "The boy wants to go .";
    assert s1.alignments.tokens == ["The", "boy", "wants", "to", "go", "."];
    assert dict(s1.alignments.items()) == {"b": {1}, "w": {2}, "g": {4}};
    assert dict(s2.alignments.items()) \
        == {"p": {0, 1}, "n": {0, 1}, "\"Barack\"": {0}, "\"Obama\"": {1},
            "v": {2}, "c": {3}, "n2": {3}, "\"Paris\"": {3}};
    assert dict(s4.alignments.items()) \
        == {"s": {1}, "p": {0}, "n": {0}, "\"Obama\"": {0}};

def test_read_quietly(bank, capsys):
    graphs = list(codec.amr.read(bank, n = 3, quiet = True));
    assert [graph.id for graph in graphs] == ["s1", "s2"];
    assert capsys.readouterr().err == "";

def test_read_in_parallel(bank):
    graphs = list(codec.amr.read(bank, cores = 2, quiet = True));
    assert [graph.id for graph in graphs] == ["s1", "s2", "s4"];
    assert relations(graphs[0]) == {("w", ":ARG0", "b"), ("w", ":ARG1", "g"),
                                    ("g", ":ARG0", "b")};

def test_inline_alignments_win_over_comment():
    amr = "(s / sleep-01~e.1 :ARG0 (p / person~e.0))";
    stream = io.StringIO("# ::id s5\n# ::tok Obama slept\n"
                         "# ::alignments 0-0 1-0.0\n" + amr + "\n");
    graph, = codec.amr.read(stream);
    _, actions, _ = build(amr);
    assert actions.alignments == {"s": {1}, "p": {0}};
    assert dict(graph.alignments.items()) == actions.alignments;

def test_sentence_without_alignments_is_skipped(capsys):
    stream = io.StringIO("# ::id x\n# ::tok a b\n(a / b)\n");
    assert list(codec.amr.read(stream)) == [];
    assert "no (usable) alignments" in capsys.readouterr().err;

def test_format1():
    line = "# ::alignments 1-0.0 2-0 4-0.r ::annotator ISI ::date 2020"
    assert read_alignments_format1(line) \
        == {1: [(0, 0)], 2: [(0,)], 4: [(0, 0)]};
    assert read_alignments_format1("# ::alignments 0-2|0.0+0.1") == {};
    assert read_alignments_format1(None) == {};
    assert read_alignments_format1("# ::tok a b") == {};

def test_format2():
    line = "# ::alignments 0-2|0.0+0.0.0+0.0.0.0+0.0.0.1 2-3|0 3-4|0.1+0.1.0"
    assert read_alignments_format2(line) \
        == {0: [(0, 0, 0, 0), (0, 0), (0, 0, 0)],
            1: [(0, 0, 0, 1), (0, 0), (0, 0, 0)],
            2: [(0,)],
            3: [(0, 1), (0, 1, 0)]};
    assert read_alignments_format2("# ::alignments 0-2|0.1+0.1.0+0.1.1") \
        == {0: [(0, 1, 0), (0, 1)], 1: [(0, 1, 1), (0, 1)]};
    assert read_alignments(line) == read_alignments_format2(line);

def test_format2_undistributable(capsys):
    line = "# ::alignments 0-3|0.1 4-5|0";
    assert read_alignments_format2(line) == {4: [(0,)]};
    assert "cannot distribute 0-3|0.1" in capsys.readouterr().err;
    assert read_alignments_format2(line, quiet = True) == {4: [(0,)]};
    assert capsys.readouterr().err == "";

def test_gorn_addresses(capsys):
    graph, actions, _ = build("(w / want-01 :ARG0 (b / boy) "
                              ":ARG1 (g / go-01 :ARG0 b))");
    reentrant = actions.reentrant_edges;
    assert gorn_address_to_vertex(graph, (0,), reentrant) == "w";
    assert gorn_address_to_vertex(graph, (0, 0), reentrant) == "b";
    assert gorn_address_to_vertex(graph, (0, 1), reentrant) == "g";
    assert gorn_address_to_vertex(graph, (0, 1, 0), reentrant) is None;
    assert "ignoring address 0.1.0" in capsys.readouterr().err;
    assert gorn_address_to_vertex(graph, (0, 1, 0)) == "b";
    assert gorn_address_to_vertex(graph, (0, 7), reentrant,
                                  quiet = True) is None;
    assert capsys.readouterr().err == "";

def test_gorn_order_follows_notation():
    graph, actions, _ = build("(a / and :op2 (y / yes) :op1 (n / no))");
    assert gorn_address_to_vertex(graph, (0, 0), actions.reentrant_edges) \
        == "y";
    assert gorn_address_to_vertex(graph, (0, 1), actions.reentrant_edges) \
        == "n";

def test_span_accessors(bank):
    s1, s2, s4 = codec.amr.read(bank, quiet = True);
    alignments = s2.alignments;
    assert alignments.aligned_vertices(3) == {"c", "n2", "\"Paris\""};
    assert alignments.span_vertices((0, 2)) \
        == {"p", "n", "\"Barack\"", "\"Obama\""};
    assert alignments.span_head((0, 2)) == "p";
    assert alignments.span_head((2, 3)) == "v";
    assert alignments.span_head((1, 3)) == "v";
    assert alignments.span_head((4, 5)) is None;
    assert alignments.surface_form((0, 2)) == "Barack Obama";
    assert alignments.lemma((0, 2)) == "Barack Obama";
    alignments.annotate(2, lemma = "visit", pos = "VBD", ne = "O");
    alignments.annotate(3, pos = "NNP", ne = "LOCATION");
    assert alignments.lemma((2, 3)) == "visit";
    assert alignments.part_of_speech((2, 3)) == "VBD";
    assert alignments.ne_type((3, 4)) == "LOCATION";

def test_span_head_requires_connected_span():
    graph = read_graph("s", "(a / and :op1 (x / x~e.0) :op2 (y / y~e.1))",
                       ["x", "y"]);
    assert graph.alignments.span_head((0, 2)) is None;

def test_headless_span_has_no_lemma_or_tags():
    graph = read_graph("s", "(a / and :op1 (x / x~e.0) :op2 (y / y~e.1))",
                       ["x", "y"]);
    alignments = graph.alignments;
    alignments.annotate(0, pos = "NN", ne = "PERSON");
    assert alignments.lemma((0, 2)) is None;
    assert alignments.part_of_speech((0, 2)) is None;
    assert alignments.ne_type((0, 2)) is None;
    assert alignments.lemma((0, 1)) == "x";
    assert alignments.part_of_speech((0, 1)) == "NN";

def test_lemma_keeps_head_form():
    graph = read_graph("s", "(r / roll-01~e.0 :ARG0 (s / stone~e.1))",
                       ["rolling", "stones"]);
    graph.alignments.annotate(0, lemma = "roll");
    graph.alignments.annotate(1, lemma = "stone");
    assert graph.alignments.lemma((0, 2)) == "rolling stone";
    assert graph.alignments.lemma((0, 1)) == "roll";
