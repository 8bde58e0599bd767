import itertools

from schemas.graph_data import Edge, Node


def make_graph(node_ids, pairs):
    """Build plain node/edge lists from ids and (source, target) pairs."""
    nodes = [Node(id=str(n), label=f"n{n}") for n in node_ids]
    counter = itertools.count()
    edges = [
        Edge(id=f"e{next(counter)}", source=str(s), target=str(t))
        for s, t in pairs
    ]
    return nodes, edges
