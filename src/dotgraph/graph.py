"""Graph object model and DOT serialization.

A :class:`Digraph` owns nodes, edges, nested :class:`SubGraph` containers
and default attribute templates for nodes and edges. ``output()`` walks the
structure and returns the DOT program text; it never mutates the graph, so
a graph can be rendered any number of times.
"""

from __future__ import annotations

from collections.abc import Iterator

from dotgraph.attrs import Attr, Attrs, quote_if_necessary


class Node:
    """A graph node.

    ``id`` is the identifier emitted in DOT and is unique within the owning
    container; ``name`` is the display name the caller asked for.
    """

    def __init__(self, name: str, node_id: str, owner: _Container) -> None:
        self._name = name
        self._id = node_id
        self._owner = owner
        self._attrs = Attrs()

    @property
    def name(self) -> str:
        return self._name

    @property
    def id(self) -> str:
        return self._id

    @property
    def owner(self) -> _Container:
        return self._owner

    @property
    def attrs(self) -> Attrs:
        return self._attrs

    def attr(self, name: str) -> Attr:
        return self._attrs.get(name)

    def output(self) -> str:
        if self._attrs.is_empty():
            return f"{quote_if_necessary(self._id)};"
        return f"{quote_if_necessary(self._id)} {self._attrs.to_gv()};"

    def __repr__(self) -> str:
        return f"Node(name={self._name!r}, id={self._id!r})"


class Edge:
    """A directed edge between two nodes of the same graph tree."""

    def __init__(self, from_node: Node, to_node: Node, owner: _Container) -> None:
        self._from = from_node
        self._to = to_node
        self._owner = owner
        self._attrs = Attrs()

    @property
    def from_node(self) -> Node:
        return self._from

    @property
    def to_node(self) -> Node:
        return self._to

    @property
    def owner(self) -> _Container:
        return self._owner

    @property
    def attrs(self) -> Attrs:
        return self._attrs

    def attr(self, name: str) -> Attr:
        return self._attrs.get(name)

    def output(self) -> str:
        text = f"{quote_if_necessary(self._from.id)} -> {quote_if_necessary(self._to.id)}"
        if self._attrs.is_empty():
            return f"{text};"
        return f"{text} {self._attrs.to_gv()};"

    def __repr__(self) -> str:
        return f"Edge({self._from.id!r} -> {self._to.id!r})"


class _Container:
    """Shared behaviour of :class:`Digraph` and :class:`SubGraph`."""

    keyword = ""

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._attrs = Attrs()
        self._node_defaults = Attrs()
        self._edge_defaults = Attrs()
        self._id_count = 0
        # dicts keep insertion order, so nodes render in the order added
        self._nodes: dict[str, Node] = {}
        self._edges: list[Edge] = []
        self._sub_graphs: list[SubGraph] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def attrs(self) -> Attrs:
        """Graph-level attributes, emitted as ``graph [...]``."""
        return self._attrs

    @property
    def node_defaults(self) -> Attrs:
        """Attributes applied to every node, emitted as ``node [...]``."""
        return self._node_defaults

    @property
    def edge_defaults(self) -> Attrs:
        """Attributes applied to every edge, emitted as ``edge [...]``."""
        return self._edge_defaults

    def attr(self, name: str) -> Attr:
        return self._attrs.get(name)

    def add_node(self, name: str) -> Node:
        """Add a node, disambiguating its id if ``name`` is already taken.

        The first node registered under a name keeps it as its id. Later
        ones get ``name`` followed by the container's id counter (advanced
        past any id already in use), and carry
        ``name`` as their ``label`` so they still display as requested.
        """
        node_id = name
        while node_id in self._nodes:
            node_id = f"{name}{self._id_count}"
            self._id_count += 1
        node = Node(name, node_id, self)
        if node_id != name:
            node.attr("label").set(name)
        self._nodes[node_id] = node
        return node

    def try_add_node(self, name: str) -> Node:
        """Return the node whose id is ``name``, adding it if absent."""
        node = self._nodes.get(name)
        if node is None:
            node = self.add_node(name)
        return node

    def get_node(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def find_node(self, node_id: str) -> Node | None:
        """Look up a node by id here, then depth-first in subgraphs."""
        node = self._nodes.get(node_id)
        if node is not None:
            return node
        for graph in self._sub_graphs:
            node = graph.find_node(node_id)
            if node is not None:
                return node
        return None

    def add_edge(self, from_node: Node, to_node: Node) -> Edge:
        """Append an edge between two nodes of this graph tree.

        Raises:
            ValueError: If either node is not in this container or any of
                its subgraphs.
        """
        if not self.contains_node(from_node) or not self.contains_node(to_node):
            raise ValueError("nodes not found")
        edge = Edge(from_node, to_node, self)
        self._edges.append(edge)
        return edge

    def add_undirected_edge(self, node_a: Node, node_b: Node) -> Edge:
        edge = self.add_edge(node_a, node_b)
        edge.attr("dir").set("none")
        return edge

    def contains_node(self, node: Node) -> bool:
        if self._nodes.get(node.id) is node:
            return True
        return any(graph.contains_node(node) for graph in self._sub_graphs)

    def add_sub_graph(self, graph: SubGraph) -> SubGraph:
        self._sub_graphs.append(graph)
        return graph

    def nodes(self) -> list[Node]:
        return list(self._nodes.values())

    def edges(self) -> list[Edge]:
        return list(self._edges)

    def sub_graphs(self) -> list[SubGraph]:
        return list(self._sub_graphs)

    def walk(self) -> Iterator[_Container]:
        """Yield this container and every nested subgraph, depth-first."""
        yield self
        for graph in self._sub_graphs:
            yield from graph.walk()

    def output(self) -> str:
        """Return the DOT program for this container."""
        parts: list[str] = []

        for keyword, attrs in (
            ("graph", self._attrs),
            ("node", self._node_defaults),
            ("edge", self._edge_defaults),
        ):
            if not attrs.is_empty():
                parts.append(f" {keyword} {attrs.to_gv()};")

        for graph in self._sub_graphs:
            parts.append(graph.output())
        for node in self._nodes.values():
            parts.append(" " + node.output())
        for edge in self._edges:
            parts.append(" " + edge.output())

        header = self.keyword
        if self._name:
            header += " " + quote_if_necessary(self._name)
        return header + " {" + "".join(parts) + "}"

    def __str__(self) -> str:
        return self.output()


class Digraph(_Container):
    """The root of a graph tree, rendered as ``digraph <name> {...}``."""

    keyword = "digraph"

    def __repr__(self) -> str:
        return f"Digraph({self._name!r})"


class SubGraph(_Container):
    """A container nested in another, rendered as ``subgraph <name> {...}``.

    Names starting with ``cluster`` are drawn as boxed clusters by Graphviz.
    """

    keyword = "subgraph"

    def __repr__(self) -> str:
        return f"SubGraph({self._name!r})"
