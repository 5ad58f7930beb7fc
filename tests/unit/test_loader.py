"""Unit tests for dotgraph.loader."""

from pathlib import Path

import pytest

from dotgraph.errors import DotGraphError
from dotgraph.loader import GraphSpecError, load_graph, load_graph_string


class TestLoadGraphString:
    def test_minimal(self) -> None:
        g = load_graph_string("name: G\n")
        assert g.output() == "digraph G {}"

    def test_default_name(self) -> None:
        assert load_graph_string("nodes: [a]\n").name == "G"

    def test_empty_name_uses_default(self) -> None:
        g = load_graph_string("name:\nnodes: [a]\n")
        assert g.output() == "digraph G { a;}"

    def test_empty_subgraph_name_is_anonymous(self) -> None:
        g = load_graph_string("subgraphs:\n  - name:\n    nodes: [a]\n")
        assert g.output() == "digraph G {subgraph { a;}}"

    def test_numeric_zero_name_is_kept(self) -> None:
        assert load_graph_string("name: 0\n").name == "0"

    def test_full_description(self, sample_graph_yaml: str) -> None:
        g = load_graph_string(sample_graph_yaml)
        assert g.attrs.to_dict() == {"rankdir": "LR"}
        assert g.node_defaults.to_dict() == {"shape": "box"}
        assert g.edge_defaults.to_dict() == {"color": "gray"}
        assert [n.id for n in g.nodes()] == ["start", "end"]
        assert g.get_node("end").attrs.to_dict() == {"color": "red"}

        (cluster,) = g.sub_graphs()
        assert cluster.name == "cluster_0"
        assert [n.id for n in cluster.nodes()] == ["worker_a", "worker_b"]
        assert len(cluster.edges()) == 1

        edges = g.edges()
        assert [(e.from_node.id, e.to_node.id) for e in edges] == [
            ("start", "worker_a"),
            ("worker_b", "end"),
            ("end", "start"),
        ]
        assert edges[1].attrs.to_dict() == {"label": "done"}
        assert edges[2].attrs.to_dict() == {"dir": "none"}

    def test_output(self, sample_graph_yaml: str) -> None:
        g = load_graph_string(sample_graph_yaml)
        assert g.output() == (
            "digraph G { graph [rankdir = LR]; node [shape = box]; edge [color = gray];"
            "subgraph cluster_0 { graph [label = Workers]; worker_a; worker_b; worker_a -> worker_b;}"
            " start; end [color = red];"
            " start -> worker_a; worker_b -> end [label = done]; end -> start [dir = none];}"
        )

    def test_edge_endpoints_are_created(self) -> None:
        g = load_graph_string("edges:\n  - [a, b]\n")
        assert [n.id for n in g.nodes()] == ["a", "b"]

    def test_repeated_node_names_are_merged(self) -> None:
        g = load_graph_string("nodes: [a, a, {name: a, attrs: {color: blue}}]\n")
        assert len(g.nodes()) == 1
        assert g.get_node("a").attrs.to_dict() == {"color": "blue"}

    def test_scalar_names_become_strings(self) -> None:
        g = load_graph_string("nodes: [1, 2]\nedges:\n  - [1, 2]\n")
        assert [n.id for n in g.nodes()] == ["1", "2"]

    def test_json_input(self) -> None:
        g = load_graph_string('{"name": "J", "nodes": ["x"], "edges": [["x", "y"]]}')
        assert g.output() == "digraph J { x; y; x -> y;}"

    def test_sibling_subgraph_node_rejected(self) -> None:
        text = """\
subgraphs:
  - name: s1
    nodes: [a]
  - name: s2
    edges:
      - [a, b]
"""
        with pytest.raises(GraphSpecError, match="another subgraph"):
            load_graph_string(text)


class TestMalformed:
    @pytest.mark.parametrize(
        "text, message",
        [
            ("- a\n- b\n", "expected mapping"),
            ("nodes: a\n", "must be a list"),
            ("graph: [a]\n", "must be a mapping"),
            ("nodes:\n  - {attrs: {}}\n", "Missing required key 'name'"),
            ("edges:\n  - [a, b, c]\n", "pair"),
            ("edges:\n  - {from: a}\n", "Missing required key 'to'"),
            ("edges:\n  - a\n", "pair or a mapping"),
            ("subgraphs:\n  - s\n", "must be a mapping"),
        ],
    )
    def test_structure_errors(self, text: str, message: str) -> None:
        with pytest.raises(GraphSpecError, match=message):
            load_graph_string(text)

    def test_invalid_yaml(self) -> None:
        with pytest.raises(GraphSpecError, match="Invalid YAML") as exc_info:
            load_graph_string("nodes: [a\n")
        assert exc_info.value.__cause__ is not None

    def test_is_a_dotgraph_error(self) -> None:
        with pytest.raises(DotGraphError):
            load_graph_string("42")


class TestLoadGraph:
    def test_from_file(self, sample_graph_file: Path) -> None:
        g = load_graph(sample_graph_file)
        assert g.name == "G"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(GraphSpecError, match="Cannot read"):
            load_graph(tmp_path / "missing.yaml")
