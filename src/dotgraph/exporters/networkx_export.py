"""Conversion between dotgraph graphs and NetworkX graphs."""

from __future__ import annotations

import networkx as nx

from dotgraph.graph import Digraph, _Container


def to_networkx(graph: _Container) -> nx.MultiDiGraph:
    """Flatten a graph tree into a NetworkX MultiDiGraph.

    Node keys are DOT ids. Attribute values are copied as strings, and each
    node's ``subgraph`` attribute names the container that owns it. Parallel
    edges are kept, one multigraph edge per :class:`Edge`.
    """
    g: nx.MultiDiGraph = nx.MultiDiGraph(name=graph.name)
    g.graph.update(graph.attrs.to_dict())
    for container in graph.walk():
        for node in container.nodes():
            g.add_node(node.id, **{"subgraph": container.name, **node.attrs.to_dict()})
    for container in graph.walk():
        for edge in container.edges():
            key = g.add_edge(edge.from_node.id, edge.to_node.id)
            g.edges[edge.from_node.id, edge.to_node.id, key].update(edge.attrs.to_dict())
    return g


def from_networkx(g: nx.Graph, name: str = "G") -> Digraph:
    """Build a :class:`Digraph` from any NetworkX graph.

    Node keys become display names (as strings). Edges of undirected
    NetworkX graphs become undirected edges.
    """
    graph = Digraph(name)
    graph.attrs.update({k: v for k, v in g.graph.items() if k != "name"})

    nodes = {}
    for key, data in g.nodes(data=True):
        node = graph.add_node(str(key))
        node.attrs.update(data)
        nodes[key] = node

    for u, v, data in g.edges(data=True):
        if g.is_directed():
            edge = graph.add_edge(nodes[u], nodes[v])
        else:
            edge = graph.add_undirected_edge(nodes[u], nodes[v])
        edge.attrs.update(data)
    return graph
