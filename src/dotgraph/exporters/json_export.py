"""JSON export for graph trees."""

from __future__ import annotations

import json
from typing import Any

from dotgraph.graph import _Container


def graph_to_json(graph: _Container) -> dict[str, Any]:
    """Export a graph and its subgraphs as a JSON-serializable dictionary."""
    return {
        "type": graph.keyword,
        "name": graph.name,
        "graph": graph.attrs.to_dict(),
        "node": graph.node_defaults.to_dict(),
        "edge": graph.edge_defaults.to_dict(),
        "subgraphs": [graph_to_json(sub) for sub in graph.sub_graphs()],
        "nodes": [
            {"id": node.id, "name": node.name, "attrs": node.attrs.to_dict()}
            for node in graph.nodes()
        ],
        "edges": [
            {
                "from": edge.from_node.id,
                "to": edge.to_node.id,
                "attrs": edge.attrs.to_dict(),
            }
            for edge in graph.edges()
        ],
    }


def export_json(graph: _Container, indent: int = 2) -> str:
    """Export a graph as a JSON string."""
    return json.dumps(graph_to_json(graph), indent=indent)
