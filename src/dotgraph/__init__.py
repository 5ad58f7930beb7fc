"""dotgraph: build directed graphs, write DOT, and render them with Graphviz."""

from dotgraph.attrs import HTML, Attr, Attrs, AttrValue, Raw
from dotgraph.engine import GraphvizEngine, OutputType, RenderResult, find_executable
from dotgraph.errors import (
    DotGraphError,
    ExecutableNotFoundError,
    GraphvizEngineError,
    GraphvizOutputError,
    GraphvizRenderError,
    PathNotFoundError,
)
from dotgraph.graph import Digraph, Edge, Node, SubGraph

__version__ = "0.1.0"

__all__ = [
    "HTML",
    "Attr",
    "AttrValue",
    "Attrs",
    "Digraph",
    "DotGraphError",
    "Edge",
    "ExecutableNotFoundError",
    "GraphvizEngine",
    "GraphvizEngineError",
    "GraphvizOutputError",
    "GraphvizRenderError",
    "Node",
    "OutputType",
    "PathNotFoundError",
    "Raw",
    "RenderResult",
    "SubGraph",
    "find_executable",
]
