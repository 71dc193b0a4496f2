import collections
import itertools


class DepthFirstSearch(object):

    def __init__(self, graph):
        self._graph = graph

        self._enter = dict()
        self._leave = dict()

        #
        # iterative rather than recursive: the consolidated graph easily grows
        # beyond the default recursion limit
        #
        def compute_timestamps(start, timestamp):
            self._enter[start] = next(timestamp)
            stack = [(start, iter(self._neighbours(start)))]
            while stack:
                node, successors = stack[-1]
                for successor in successors:
                    if successor not in self._enter:
                        self._enter[successor] = next(timestamp)
                        stack.append((successor,
                                      iter(self._neighbours(successor))))
                        break
                else:
                    self._leave[node] = next(timestamp)
                    stack.pop()
        timestamp = itertools.count()
        for node in self._graph.nodes:
            if node not in self._enter:
                compute_timestamps(node, timestamp)

    def _neighbours(self, id):
        node = self._graph.find_node(id)
        return [edge.tgt for edge in sorted(node.outgoing_edges)]

    def is_back_edge(self, edge):
        return \
            self._enter[edge.tgt] < self._enter[edge.src] and \
            self._leave[edge.src] < self._leave[edge.tgt]


def is_cyclic(graph):
    dfs = DepthFirstSearch(graph)
    for edge in graph.edges:
        if edge.is_loop() or dfs.is_back_edge(edge):
            return True
    return False


def descendants(graph, source):
    """Return the set of nodes reachable from source, excluding source itself
    unless it lies on a cycle."""
    result = set()
    agenda = [source]
    while agenda:
        node = graph.find_node(agenda.pop())
        if node is None:
            continue
        for edge in node.outgoing_edges:
            if edge.tgt not in result:
                result.add(edge.tgt)
                agenda.append(edge.tgt)
    return result


def reachable(graph, source, target):
    if source == target:
        return True
    return target in descendants(graph, source)


def depths(graph, root):
    """Breadth-first distances from root along directed edges."""
    result = {root: 0}
    queue = collections.deque([root])
    while queue:
        node = graph.find_node(queue.popleft())
        if node is None:
            continue
        for edge in node.outgoing_edges:
            if edge.tgt not in result:
                result[edge.tgt] = result[node.id] + 1
                queue.append(edge.tgt)
    return result


def components(graph, nodes=None):
    """Weakly connected components, optionally of the subgraph induced by
    nodes; each component is a set of node identifiers."""
    if nodes is None:
        nodes = set(graph.nodes)
    else:
        nodes = {node for node in nodes if node in graph.nodes}
    result = []
    seen = set()
    for start in sorted(nodes):
        if start in seen:
            continue
        component = {start}
        agenda = [start]
        seen.add(start)
        while agenda:
            node = graph.find_node(agenda.pop())
            for edge in node.outgoing_edges | node.incoming_edges:
                for neighbour in (edge.src, edge.tgt):
                    if neighbour in nodes and neighbour not in seen:
                        seen.add(neighbour)
                        component.add(neighbour)
                        agenda.append(neighbour)
        result.append(component)
    return result

