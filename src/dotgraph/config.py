"""Render configuration for dotgraph projects."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotgraph.engine import GraphvizEngine
from dotgraph.graph import Digraph

DOTGRAPH_DIR = ".dotgraph"
CONFIG_FILE = "config.json"


@dataclass
class RenderConfig:
    """Defaults applied to a render engine."""

    layout: str = "dot"
    formats: dict[str, str] = field(default_factory=lambda: {"png": "output.png"})
    directory: str = "."
    fail_on_nonzero_exit: bool = False
    timeout: float | None = None
    dot_suffix: str = ".dot"


def _config_path(project_root: Path) -> Path:
    return project_root / DOTGRAPH_DIR / CONFIG_FILE


def save_config(config: RenderConfig, project_root: Path) -> Path:
    """Save render config to .dotgraph/config.json. Returns the config path."""
    dotgraph_dir = project_root / DOTGRAPH_DIR
    dotgraph_dir.mkdir(parents=True, exist_ok=True)
    path = _config_path(project_root)
    data = {
        "layout": config.layout,
        "formats": config.formats,
        "directory": config.directory,
        "fail_on_nonzero_exit": config.fail_on_nonzero_exit,
        "timeout": config.timeout,
        "dot_suffix": config.dot_suffix,
    }
    path.write_text(json.dumps(data, indent=2) + "\n")
    return path


def load_config(project_root: Path) -> RenderConfig:
    """Load render config from .dotgraph/config.json."""
    path = _config_path(project_root)
    if not path.exists():
        raise FileNotFoundError(f"No config found at {path}")
    data = json.loads(path.read_text())
    defaults = RenderConfig()
    return RenderConfig(
        layout=data.get("layout", defaults.layout),
        formats=data.get("formats") or defaults.formats,
        directory=data.get("directory", defaults.directory),
        fail_on_nonzero_exit=data.get("fail_on_nonzero_exit", defaults.fail_on_nonzero_exit),
        timeout=data.get("timeout", defaults.timeout),
        dot_suffix=data.get("dot_suffix", defaults.dot_suffix),
    )


def is_initialized(project_root: Path) -> bool:
    """Check if the project has a dotgraph config."""
    return _config_path(project_root).exists()


def load_or_default(project_root: Path) -> RenderConfig:
    if is_initialized(project_root):
        return load_config(project_root)
    return RenderConfig()


def engine_from_config(
    graph: Digraph, config: RenderConfig, environ: Mapping[str, str] | None = None
) -> GraphvizEngine:
    """Build a render engine for ``graph`` using ``config``'s settings.

    The default ``png`` type is replaced by the configured formats.
    """
    engine = GraphvizEngine(
        graph,
        layout=config.layout,
        directory=config.directory,
        fail_on_nonzero_exit=config.fail_on_nonzero_exit,
        timeout=config.timeout,
        dot_suffix=config.dot_suffix,
        environ=environ,
    )
    for name, file_path in config.formats.items():
        engine.add_type(name).to_file_path(file_path)
    if "png" not in config.formats and config.formats:
        engine.remove_type("png")
    return engine
