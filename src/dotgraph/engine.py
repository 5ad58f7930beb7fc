"""Render a graph by running a Graphviz layout program on its DOT text."""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotgraph.errors import (
    ExecutableNotFoundError,
    GraphvizOutputError,
    GraphvizRenderError,
    PathNotFoundError,
)
from dotgraph.graph import Digraph

logger = logging.getLogger(__name__)

PATH = "PATH"
DOT_FILE_PREFIX = "graph"
LAYOUTS = ("dot", "neato", "fdp", "sfdp", "twopi", "circo")


def path_env_name(environ: Mapping[str, str] | None = None) -> str:
    """Return the environment key naming the search path, in any case.

    Raises:
        PathNotFoundError: If no such variable exists.
    """
    env = os.environ if environ is None else environ
    for key in env:
        if key.upper() == PATH:
            return key
    raise PathNotFoundError("Path environment variable not found")


def find_executable(program: str, environ: Mapping[str, str] | None = None) -> Path:
    """Locate ``program`` (or ``program.exe``) on the search path.

    Directories are tried in order and the first executable regular file
    wins.

    Raises:
        PathNotFoundError: If the environment has no search path.
        ExecutableNotFoundError: If no directory holds the program.
    """
    env = os.environ if environ is None else environ
    search_path = env[path_env_name(env)]

    for directory in search_path.split(os.pathsep):
        if not directory:
            continue
        for filename in (program, f"{program}.exe"):
            candidate = Path(directory) / filename
            if candidate.is_file() and os.access(candidate, os.X_OK):
                return candidate

    raise ExecutableNotFoundError(program)


@dataclass
class OutputType:
    """A render target: a Graphviz output format and the file to write."""

    name: str
    file_path: str = ""

    def __post_init__(self) -> None:
        if not self.file_path:
            self.file_path = f"output.{self.name}"

    def to_file_path(self, file_path: str | os.PathLike[str]) -> OutputType:
        self.file_path = os.fspath(file_path)
        return self


@dataclass
class RenderResult:
    """Outcome of one run of the layout program."""

    command: list[str] = field(default_factory=list)
    returncode: int = 0
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class GraphvizEngine:
    """Writes a graph's DOT text to a temp file and runs a layout program on it.

    The engine starts with a single ``png`` output type. At least one
    output type always stays registered.

    Usage:
        engine = GraphvizEngine(graph).layout("neato").to_file_path("g.png")
        engine.add_type("svg").to_file_path("g.svg")
        engine.output()
    """

    def __init__(
        self,
        graph: Digraph,
        *,
        layout: str = "dot",
        directory: str | os.PathLike[str] = ".",
        fail_on_nonzero_exit: bool = False,
        timeout: float | None = None,
        dot_suffix: str = ".dot",
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._graph = graph
        self._types: dict[str, OutputType] = {"png": OutputType("png")}
        self._layout = layout
        self._directory = os.fspath(directory)
        self.fail_on_nonzero_exit = fail_on_nonzero_exit
        self.timeout = timeout
        self.dot_suffix = dot_suffix
        self._environ = environ

    @property
    def graph(self) -> Digraph:
        return self._graph

    @property
    def layout_manager(self) -> str:
        return self._layout

    @property
    def directory(self) -> str:
        return self._directory

    def layout(self, layout_manager: str) -> GraphvizEngine:
        """Set the layout program, e.g. dot, neato, fdp, sfdp, twopi, circo."""
        self._layout = layout_manager
        return self

    def from_directory_path(self, path: str | os.PathLike[str]) -> GraphvizEngine:
        """Set the working directory the layout program runs in."""
        self._directory = os.fspath(path)
        return self

    def types(self) -> list[OutputType]:
        return list(self._types.values())

    def add_type(self, name: str) -> OutputType:
        """Register an output format, or return it if already registered."""
        output = self._types.get(name)
        if output is None:
            output = OutputType(name)
            self._types[name] = output
        return output

    def remove_type(self, name: str) -> GraphvizEngine:
        if len(self._types) == 1:
            raise RuntimeError("must be a type defined.")
        self._types.pop(name, None)
        return self

    def to_file_path(self, file_path: str | os.PathLike[str]) -> GraphvizEngine:
        """Set the file path of the only registered output type."""
        if len(self._types) > 1:
            raise RuntimeError("there was more of a type defined.")
        next(iter(self._types.values())).to_file_path(file_path)
        return self

    def build_command(self, program: str | os.PathLike[str], dot_file: str | os.PathLike[str]) -> list[str]:
        command = [os.fspath(program)]
        for output in self._types.values():
            command.append(f"-T{output.name}")
            command.append(f"-o{output.file_path}")
        command.append(os.fspath(dot_file))
        return command

    def output(self) -> RenderResult:
        """Render the graph to every registered output type.

        Blocks until the layout program exits or ``timeout`` elapses. The
        temporary DOT file is removed on every path out of this method.

        Raises:
            PathNotFoundError: If the environment has no search path.
            ExecutableNotFoundError: If the layout program is not found.
            GraphvizOutputError: If writing, spawning or waiting fails.
            GraphvizRenderError: On a non-zero exit when
                ``fail_on_nonzero_exit`` is set.
        """
        dot_content = self._graph.output()
        program = find_executable(self._layout, self._environ)
        logger.debug("resolved %s to %s", self._layout, program)

        dot_file = self._write_dot_file(dot_content)
        try:
            command = self.build_command(program, dot_file)
            logger.debug("running %s in %s", command, self._directory)
            proc = subprocess.run(
                command,
                cwd=self._directory,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            logger.error("command timed out after %s seconds", self.timeout)
            raise GraphvizOutputError(f"{self._layout} timed out after {self.timeout} seconds") from exc
        except OSError as exc:
            logger.exception("command error")
            raise GraphvizOutputError(str(exc)) from exc
        finally:
            dot_file.unlink(missing_ok=True)

        result = RenderResult(command=command, returncode=proc.returncode, stderr=proc.stderr or "")
        if not result.success:
            logger.error("%s exited with status %d: %s", self._layout, result.returncode, result.stderr)
            if self.fail_on_nonzero_exit:
                raise GraphvizRenderError(result.returncode, result.stderr)
        return result

    def _write_dot_file(self, dot_content: str) -> Path:
        """Write the DOT text to a new temp file and return its path."""
        try:
            fd, name = tempfile.mkstemp(prefix=DOT_FILE_PREFIX, suffix=self.dot_suffix)
        except OSError as exc:
            raise GraphvizOutputError(str(exc)) from exc

        path = Path(name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(dot_content)
        except OSError as exc:
            path.unlink(missing_ok=True)
            raise GraphvizOutputError(str(exc)) from exc
        return path
