"""Shared test fixtures for dotgraph."""

import os
import stat
import sys
from pathlib import Path

import pytest

from dotgraph.graph import Digraph

# Copies the DOT input to every -o target and records the input path.
FAKE_LAYOUT_SCRIPT = """\
#!/bin/sh
eval "dot_file=\\${$#}"
echo "$dot_file" > input_path.txt
echo "$@" > args.txt
for arg in "$@"; do
  case "$arg" in
    -o*) cp "$dot_file" "${arg#-o}" ;;
  esac
done
"""

FAILING_LAYOUT_SCRIPT = """\
#!/bin/sh
echo "Error: syntax error in line 1" >&2
exit 1
"""

SLOW_LAYOUT_SCRIPT = """\
#!/bin/sh
exec sleep 5
"""

# Writes bytes that are not valid UTF-8 to stderr, then fails.
BAD_BYTES_LAYOUT_SCRIPT = """\
#!/bin/sh
printf 'bad \\377\\376 label\\n' >&2
exit 1
"""


def _write_executable(directory: Path, name: str, content: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if sys.platform != "win32":
        return
    skip = pytest.mark.skip(reason="fake layout programs are shell scripts")
    for item in items:
        if "bin_dir" in getattr(item, "fixturenames", ()):
            item.add_marker(skip)


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """Directory holding fake layout programs."""
    d = tmp_path / "bin"
    d.mkdir()
    return d


@pytest.fixture
def fake_environ(bin_dir: Path) -> dict[str, str]:
    """An environment whose search path is only ``bin_dir``."""
    return {"PATH": str(bin_dir)}


@pytest.fixture
def fake_dot(bin_dir: Path) -> Path:
    return _write_executable(bin_dir, "dot", FAKE_LAYOUT_SCRIPT)


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    d = tmp_path / "work"
    d.mkdir()
    return d


@pytest.fixture
def sample_graph() -> Digraph:
    """A small graph: two nodes, one edge and default templates."""
    g = Digraph("G")
    g.attr("rankdir").set("LR")
    g.node_defaults.get("shape").set("box")
    a = g.add_node("a")
    b = g.add_node("b")
    g.add_edge(a, b).attr("label").set("calls")
    return g


@pytest.fixture
def sample_graph_yaml() -> str:
    """Return a graph description exercising every section."""
    return """\
name: G
graph:
  rankdir: LR
node:
  shape: box
edge:
  color: gray
subgraphs:
  - name: cluster_0
    graph:
      label: Workers
    nodes: [worker_a, worker_b]
    edges:
      - [worker_a, worker_b]
nodes:
  - start
  - name: end
    attrs:
      color: red
edges:
  - [start, worker_a]
  - from: worker_b
    to: end
    attrs:
      label: done
  - from: end
    to: start
    undirected: true
"""


@pytest.fixture
def sample_graph_file(tmp_path: Path, sample_graph_yaml: str) -> Path:
    path = tmp_path / "graph.yaml"
    path.write_text(sample_graph_yaml)
    return path


@pytest.fixture
def path_env(monkeypatch: pytest.MonkeyPatch, bin_dir: Path) -> Path:
    """Put ``bin_dir`` first on the process search path."""
    name = next((k for k in os.environ if k.upper() == "PATH"), "PATH")
    original = os.environ.get(name, "")
    monkeypatch.setenv(name, os.pathsep.join([str(bin_dir), original]))
    return bin_dir


@pytest.fixture
def make_layout(bin_dir: Path):
    """Factory writing a fake layout program into ``bin_dir``.

    ``kind`` is one of "copy", "fail", "bad-bytes" or "slow".
    """
    scripts = {
        "copy": FAKE_LAYOUT_SCRIPT,
        "fail": FAILING_LAYOUT_SCRIPT,
        "bad-bytes": BAD_BYTES_LAYOUT_SCRIPT,
        "slow": SLOW_LAYOUT_SCRIPT,
    }

    def _make(name: str, kind: str = "copy", directory: Path | None = None) -> Path:
        return _write_executable(directory or bin_dir, name, scripts[kind])

    return _make
