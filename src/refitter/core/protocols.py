"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from typing import Protocol

from refitter.core.models import FailureReport, GeneratedArtifact, GenerationRequest


class GenerationEngine(Protocol):
    """Contract for spec-to-code generation backends.

    Any object that implements :meth:`generate` with the correct
    signature satisfies this protocol structurally (no explicit
    inheritance required).
    """

    def generate(self, request: GenerationRequest) -> GeneratedArtifact:
        """Fetch/read the document named by *request* and emit code for it.

        Implementations must map all backend-specific exceptions to
        :class:`~refitter.exceptions.RefitterError` subclasses and must
        never return a partial artifact.

        Raises
        ------
        FetchError
            When a remote document is unreachable or answers non-200.
        SpecParseError
            When the document is malformed or not an OpenAPI document.
        GenerationError
            For unsupported constructs, naming collisions or unresolvable
            references.
        """
        ...  # pragma: no cover


class TelemetrySink(Protocol):
    """Contract for error-report destinations.

    Delivery is best-effort: implementations may raise
    :class:`~refitter.exceptions.TelemetryError`, which callers log and
    drop.
    """

    def submit(self, report: FailureReport) -> None:
        """Queue *report* for delivery."""
        ...  # pragma: no cover

    def flush(self, timeout: float) -> None:
        """Deliver queued reports, spending at most *timeout* seconds."""
        ...  # pragma: no cover

    def close(self) -> None:
        """Release any resources held by the sink."""
        ...  # pragma: no cover
