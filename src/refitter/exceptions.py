"""Custom exception hierarchy for refitter.

All exceptions that cross layer boundaries must inherit from
:class:`RefitterError`.  Raw third-party exceptions (httpx, PyYAML,
jsonref) must never propagate beyond the infrastructure layer — they are
caught there and re-raised as a typed subclass defined here.

Each class carries the process exit code used when it ends a run.

Hierarchy
---------
RefitterError
├── ValidationError
├── FetchError
├── SpecParseError
├── GenerationError
├── WriteError
└── TelemetryError
"""

from __future__ import annotations

from refitter.utils import exit_codes


class RefitterError(Exception):
    """Base exception for all refitter errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI can render it and pick an exit code.
    """

    exit_code: int = exit_codes.GENERATION_ERROR
    """Process exit code used when this error terminates a run."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message: str = message
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Input validation ------------------------------------------------------

class ValidationError(RefitterError):
    """Raised when the input reference is missing or the local file does not exist."""

    exit_code = exit_codes.VALIDATION_ERROR


# --- Specification retrieval / parsing -------------------------------------

class FetchError(RefitterError):
    """Raised when a specification cannot be retrieved (network, HTTP status, file read)."""


class SpecParseError(RefitterError):
    """Raised when a specification is not valid JSON/YAML or not an OpenAPI document."""


# --- Code generation -------------------------------------------------------

class GenerationError(RefitterError):
    """Raised when code cannot be emitted for an otherwise readable specification."""


# --- Output ----------------------------------------------------------------

class WriteError(RefitterError):
    """Raised when the generated code cannot be written to its destination."""

    exit_code = exit_codes.WRITE_ERROR


# --- Telemetry -------------------------------------------------------------

class TelemetryError(RefitterError):
    """Raised by telemetry sinks when a report cannot be delivered.

    Never escalated to the user: the failure reporter logs and drops it.
    """
