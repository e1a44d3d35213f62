"""Exit-code constants shared by the exception hierarchy and the CLI.

Every failure class carries one of these values, so the process exit
code tells scripts which stage of a run failed.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit — the output file was written."""

VALIDATION_ERROR: int = 1
"""The input reference was missing, blank, or pointed at a missing file."""

GENERATION_ERROR: int = 2
"""Fetching, parsing, or generating from the specification failed."""

WRITE_ERROR: int = 3
"""The generated code could not be written to the output path."""

UNEXPECTED_ERROR: int = 4
"""An unhandled exception escaped all known error boundaries."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""
