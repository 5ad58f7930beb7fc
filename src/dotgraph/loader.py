"""Build graphs from YAML (or JSON) graph descriptions."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from dotgraph.errors import DotGraphError
from dotgraph.graph import Digraph, Node, SubGraph, _Container


class GraphSpecError(DotGraphError):
    """Raised when a graph description is malformed."""


def load_graph(path: Path) -> Digraph:
    """Load a graph description file."""
    try:
        text = path.read_text()
    except OSError as exc:
        raise GraphSpecError(f"Cannot read {path}: {exc}") from exc
    return load_graph_string(text, source=str(path))


def load_graph_string(text: str, source: str = "<string>") -> Digraph:
    """Parse a graph description and build a :class:`Digraph`."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise GraphSpecError(f"Invalid YAML in {source}: {exc}") from exc

    if not isinstance(raw, dict):
        raise GraphSpecError(f"Invalid graph description in {source}: expected mapping")

    graph = Digraph(_name(raw, "G"))
    _populate(graph, graph, raw, "root")
    return graph


def _populate(root: Digraph, container: _Container, raw: dict[str, Any], context: str) -> None:
    container.attrs.update(_mapping(raw, "graph", context))
    container.node_defaults.update(_mapping(raw, "node", context))
    container.edge_defaults.update(_mapping(raw, "edge", context))

    # subgraphs first so edges below may refer to their nodes
    for i, sub_raw in enumerate(_sequence(raw, "subgraphs", context)):
        sub_context = f"{context}.subgraphs[{i}]"
        if not isinstance(sub_raw, dict):
            raise GraphSpecError(f"{sub_context} must be a mapping")
        sub = container.add_sub_graph(SubGraph(_name(sub_raw, "")))
        _populate(root, sub, sub_raw, sub_context)

    for i, node_raw in enumerate(_sequence(raw, "nodes", context)):
        if isinstance(node_raw, dict):
            if "name" not in node_raw:
                raise GraphSpecError(f"Missing required key 'name' in {context}.nodes[{i}]")
            node = container.try_add_node(str(node_raw["name"]))
            node.attrs.update(_mapping(node_raw, "attrs", f"{context}.nodes[{i}]"))
        else:
            container.try_add_node(str(node_raw))

    for i, edge_raw in enumerate(_sequence(raw, "edges", context)):
        edge_context = f"{context}.edges[{i}]"
        attrs: dict[str, Any] = {}
        undirected = False
        if isinstance(edge_raw, list):
            if len(edge_raw) != 2:
                raise GraphSpecError(f"{edge_context} must be a [from, to] pair")
            source, target = edge_raw
        elif isinstance(edge_raw, dict):
            for key in ("from", "to"):
                if key not in edge_raw:
                    raise GraphSpecError(f"Missing required key '{key}' in {edge_context}")
            source, target = edge_raw["from"], edge_raw["to"]
            attrs = _mapping(edge_raw, "attrs", edge_context)
            undirected = bool(edge_raw.get("undirected", False))
        else:
            raise GraphSpecError(f"{edge_context} must be a pair or a mapping")

        from_node = _resolve(root, container, str(source))
        to_node = _resolve(root, container, str(target))
        if undirected:
            edge = container.add_undirected_edge(from_node, to_node)
        else:
            edge = container.add_edge(from_node, to_node)
        edge.attrs.update(attrs)


def _resolve(root: Digraph, container: _Container, node_id: str) -> Node:
    """Find a node by id in ``container``'s tree or the whole graph, else add it."""
    node = container.find_node(node_id)
    if node is None and root.find_node(node_id) is None:
        return container.add_node(node_id)
    if node is None:
        raise GraphSpecError(
            f"Node '{node_id}' belongs to another subgraph and cannot be used here"
        )
    return node


def _name(raw: dict[str, Any], default: str) -> str:
    # a bare `name:` key loads as None
    value = raw.get("name")
    return default if value is None else str(value)


def _mapping(raw: dict[str, Any], key: str, context: str) -> dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise GraphSpecError(f"{context}.{key} must be a mapping")
    return value


def _sequence(raw: dict[str, Any], key: str, context: str) -> list[Any]:
    value = raw.get(key) or []
    if not isinstance(value, list):
        raise GraphSpecError(f"{context}.{key} must be a list")
    return value
