"""CLI console helpers built on Rich.

Consoles are created per call so they always bind to the current
``sys.stdout`` / ``sys.stderr`` (which keeps pytest's ``capsys`` working).
Success output goes to stdout, diagnostics to stderr.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def get_rich_console(*, stderr: bool = False) -> Console:
    """Create a Rich console targeting stdout or stderr."""
    return Console(stderr=stderr, highlight=False)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy over a fresh Rich console."""

    def __init__(self, *, stderr: bool) -> None:
        self._stderr = stderr

    def print(self, *objects: object) -> None:
        """Render markup without wrapping long paths or messages."""
        get_rich_console(stderr=self._stderr).print(*objects, soft_wrap=True)


console = _ConsoleProxy(stderr=False)
error_console = _ConsoleProxy(stderr=True)


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through Rich on stderr.

    ``WARNING`` and above by default; everything with *verbose*.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=get_rich_console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)
