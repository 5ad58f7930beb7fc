"""Click CLI entry point for dotgraph."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from dotgraph import __version__
from dotgraph.config import (
    RenderConfig,
    engine_from_config,
    is_initialized,
    load_or_default,
    save_config,
)
from dotgraph.engine import LAYOUTS
from dotgraph.errors import DotGraphError


@click.group()
@click.version_option(version=__version__, prog_name="dotgraph")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """dotgraph: describe graphs, write DOT, render with Graphviz."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
def init() -> None:
    """Write a default render config for this directory."""
    project_root = Path.cwd()
    if is_initialized(project_root):
        click.echo("Warning: Project is already initialized. Keeping existing config.")
        return
    path = save_config(RenderConfig(), project_root)
    click.echo(f"Initialized dotgraph project.\n  Config:  {path}")


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def dot(ctx: click.Context, file_path: Path) -> None:
    """Print the DOT text for a graph description."""
    from dotgraph.loader import load_graph

    try:
        graph = load_graph(file_path)
    except DotGraphError as e:
        click.echo(f"Error: {e}")
        ctx.exit(1)
        return
    click.echo(graph.output())


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-T", "formats", multiple=True, help="Output format, may be repeated")
@click.option("-o", "output", default=None, help="Output file (single format only)")
@click.option(
    "-K",
    "layout",
    default=None,
    help=f"Layout program ({', '.join(LAYOUTS)} or any other on PATH)",
)
@click.option("--strict", is_flag=True, default=False, help="Fail on a non-zero exit status")
@click.option("--timeout", type=float, default=None, help="Seconds before the render is aborted")
@click.pass_context
def render(
    ctx: click.Context,
    file_path: Path,
    formats: tuple[str, ...],
    output: str | None,
    layout: str | None,
    strict: bool,
    timeout: float | None,
) -> None:
    """Render a graph description with Graphviz."""
    from dotgraph.loader import load_graph

    config = load_or_default(Path.cwd())
    if formats:
        config.formats = {fmt: f"{file_path.stem}.{fmt}" for fmt in formats}
    if layout:
        config.layout = layout
    if strict:
        config.fail_on_nonzero_exit = True
    if timeout is not None:
        config.timeout = timeout

    try:
        graph = load_graph(file_path)
        engine = engine_from_config(graph, config)
        if output:
            engine.to_file_path(output)
        result = engine.output()
    except (DotGraphError, RuntimeError) as e:
        click.echo(f"Error: {e}")
        ctx.exit(1)
        return

    if not result.success:
        click.echo(f"Warning: {engine.layout_manager} exited with status {result.returncode}")
        if result.stderr:
            click.echo(result.stderr.rstrip())
        return
    for output_type in engine.types():
        click.echo(f"Wrote {output_type.file_path}")


@cli.command()
@click.argument("program", default="dot")
@click.pass_context
def which(ctx: click.Context, program: str) -> None:
    """Show where a layout program resolves on the search path."""
    from dotgraph.engine import find_executable

    try:
        click.echo(str(find_executable(program)))
    except DotGraphError as e:
        click.echo(f"Error: {e}")
        ctx.exit(1)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "fmt", type=click.Choice(["json"]), default="json")
@click.pass_context
def export(ctx: click.Context, file_path: Path, fmt: str) -> None:
    """Export the structure of a graph description."""
    from dotgraph.exporters.json_export import export_json
    from dotgraph.loader import load_graph

    try:
        graph = load_graph(file_path)
    except DotGraphError as e:
        click.echo(f"Error: {e}")
        ctx.exit(1)
        return
    click.echo(export_json(graph))
