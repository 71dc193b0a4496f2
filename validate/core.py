import sys;

import analyzer;
from graph import AMRGraph, SemanticGraph;
from validate.utilities import report;

VALIDATIONS = {"edges", "loops", "cycles", "root", "alignments", "meanings"};

def test(graph, actions = VALIDATIONS, stream = sys.stderr):
  n = 0;
  if not isinstance(graph.id, str) or len(graph.id) == 0:
    n += 1;
    report(graph,
           "missing or invalid ‘id’ property",
           stream = stream);

  if "edges" in actions:
    for edge in sorted(graph.edges):
      if edge.src not in graph.nodes:
        n += 1;
        report(graph, "invalid source", edge = edge, stream = stream);
      if edge.tgt not in graph.nodes:
        n += 1;
        report(graph, "invalid target", edge = edge, stream = stream);
    for id, node in graph.nodes.items():
      for edge in node.outgoing_edges | node.incoming_edges:
        if edge not in graph.edges:
          n += 1;
          report(graph, "stale incident edge", node = id, edge = edge,
                 stream = stream);

  if "loops" in actions:
    for edge in sorted(graph.edges):
      if edge.is_loop():
        n += 1;
        report(graph, "self loop", edge = edge, stream = stream);

  if isinstance(graph, AMRGraph):
    if "root" in actions and graph.root not in graph.nodes:
      n += 1;
      report(graph, "missing root {}".format(graph.root), stream = stream);
    if "cycles" in actions and analyzer.is_cyclic(graph):
      n += 1;
      report(graph, "cyclic sentence graph", stream = stream);
    if "alignments" in actions and graph.alignments is not None:
      size = len(graph.alignments.tokens);
      for id, tokens in sorted(graph.alignments.items()):
        if id not in graph.nodes:
          n += 1;
          report(graph, "alignment for unknown node", node = id,
                 stream = stream);
        for token in sorted(tokens):
          if token < 0 or token >= size:
            n += 1;
            report(graph, "invalid token index {}".format(token),
                   node = id, stream = stream);

  if isinstance(graph, SemanticGraph) and "meanings" in actions:
    for id in sorted(graph.meanings):
      if id not in graph.nodes:
        n += 1;
        report(graph, "meaning for unknown node", node = id,
               stream = stream);
    #
    # named entities are merged by reference: two nodes sharing one is a
    # failed merge
    #
    references = dict();
    for id in sorted(graph.meanings):
      meaning = graph.meanings[id];
      if meaning.ne and meaning.reference in references:
        n += 1;
        report(graph,
               "named entity ‘{}’ also on node #{}"
               "".format(meaning.reference, references[meaning.reference]),
               node = id, level = "W", stream = stream);
      references.setdefault(meaning.reference, id);

  return n;
