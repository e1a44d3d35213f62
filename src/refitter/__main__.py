"""Allow ``python -m refitter`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m refitter`` behaves identically to the ``refitter``
console script.
"""

from __future__ import annotations

from refitter.cli.app import cli

if __name__ == "__main__":
    cli()
