"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No network I/O; the only filesystem access is the input existence probe.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from refitter.core.generation_service import GenerationService
from refitter.core.input_resolver import is_remote_reference, resolve_input
from refitter.core.models import (
    FailureReport,
    GeneratedArtifact,
    GenerationRequest,
    InputKind,
    RawOptions,
    ResolvedInput,
    TypeAccessibility,
)
from refitter.core.protocols import GenerationEngine, TelemetrySink
from refitter.core.request_builder import build_request, resolve_output_path
from refitter.core.result import Err, Ok, Result

__all__: list[str] = [
    "Err",
    "FailureReport",
    "GeneratedArtifact",
    "GenerationEngine",
    "GenerationRequest",
    "GenerationService",
    "InputKind",
    "Ok",
    "RawOptions",
    "ResolvedInput",
    "Result",
    "TelemetrySink",
    "TypeAccessibility",
    "build_request",
    "is_remote_reference",
    "resolve_input",
    "resolve_output_path",
]
