"""Error types raised by dotgraph."""

from __future__ import annotations


class DotGraphError(Exception):
    """Base class for dotgraph errors."""


class GraphvizEngineError(DotGraphError):
    """Raised when the render engine is misconfigured."""


class PathNotFoundError(GraphvizEngineError):
    """Raised when the environment has no PATH variable."""


class ExecutableNotFoundError(GraphvizEngineError):
    """Raised when a layout program is not on the search path."""

    def __init__(self, program: str) -> None:
        super().__init__(f"{program} program not found.")
        self.program = program


class GraphvizOutputError(DotGraphError):
    """Raised when generating the output file fails.

    Always chained from the underlying I/O, spawn or timeout error.
    """


class GraphvizRenderError(GraphvizOutputError):
    """Raised for a non-zero exit when the engine is strict about it."""

    def __init__(self, returncode: int, stderr: str) -> None:
        message = f"layout program exited with status {returncode}"
        if stderr.strip():
            message += f": {stderr.strip()}"
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
