import sys;

def report(graph, message, node = None, edge = None,
           level = "E", stream = sys.stderr):
  if node is not None:
    node = "; node #{}".format(node);
  else:
    node = "";
  if edge is not None:
    edge = "; edge {} -{}-> {}".format(edge.src, edge.lab, edge.tgt);
  else:
    edge = "";
  print("validate(): [{}] graph #{}{}{}: {}."
        "".format(level, graph.id, node, edge, message),
        file = stream);
