"""Domain models for refitter.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and serialization.  They carry zero I/O and
remain pure across the whole run.
"""

from __future__ import annotations

import argparse
import dataclasses
import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Command-line intent
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RawOptions:
    """The literal user input, exactly as parsed from the command line."""

    input_ref: str | None
    """URL or path of the OpenAPI document.  Mandatory once validated."""

    namespace: str | None = None
    """Namespace override for generated types."""

    output_path: str | None = None
    """Destination file for the generated code."""

    no_auto_generated_header: bool = False
    interface_only: bool = False
    use_api_response: bool = False
    internal: bool = False
    cancellation_tokens: bool = False
    no_operation_headers: bool = False

    @classmethod
    def from_namespace(cls, args: argparse.Namespace) -> RawOptions:
        """Build options from the parser result, ignoring unrelated attributes."""
        return cls(
            input_ref=args.input_ref,
            namespace=args.namespace,
            output_path=args.output,
            no_auto_generated_header=bool(args.no_auto_generated_header),
            interface_only=bool(args.interface_only),
            use_api_response=bool(args.use_api_response),
            internal=bool(args.internal),
            cancellation_tokens=bool(args.cancellation_tokens),
            no_operation_headers=bool(args.no_operation_headers),
        )


# ---------------------------------------------------------------------------
# Input classification
# ---------------------------------------------------------------------------

class InputKind(enum.Enum):
    """Where the OpenAPI document lives."""

    REMOTE_REFERENCE = "remote"
    LOCAL_PATH = "local"


@dataclass(frozen=True, slots=True)
class ResolvedInput:
    """An input reference that passed the pre-flight gate."""

    reference: str
    kind: InputKind
    absolute_path: Path | None = None
    """Resolved file path for local inputs, ``None`` for remote ones."""

    @property
    def is_remote(self) -> bool:
        return self.kind is InputKind.REMOTE_REFERENCE


# ---------------------------------------------------------------------------
# Engine request
# ---------------------------------------------------------------------------

class TypeAccessibility(enum.Enum):
    """Accessibility modifier applied to every generated type."""

    PUBLIC = "Public"
    INTERNAL = "Internal"

    @property
    def keyword(self) -> str:
        """The C# keyword for this accessibility."""
        return self.value.lower()


@dataclass(frozen=True, slots=True)
class GenerationRequest:
    """Normalized, engine-facing request.  The engine's only input."""

    openapi_path: str
    namespace: str
    add_auto_generated_header: bool
    generate_contracts: bool
    return_api_response: bool
    type_accessibility: TypeAccessibility
    use_cancellation_tokens: bool
    generate_operation_headers: bool

    def to_attributes(self) -> dict[str, Any]:
        """Flatten the request into JSON-safe key/value pairs."""
        attributes: dict[str, Any] = {}
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            attributes[field.name] = value.value if isinstance(value, enum.Enum) else value
        return attributes


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class GeneratedArtifact:
    """Generated source code, owned by the output writer until written."""

    code: str

    @property
    def byte_length(self) -> int:
        """Length of the UTF-8 payload that will be written to disk."""
        return len(self.code.encode("utf-8"))


@dataclass(frozen=True, slots=True)
class FailureReport:
    """Structured error report submitted to a telemetry sink."""

    message: str
    exception_type: str
    stack_trace: str
    request: dict[str, Any]
    timestamp: str
    tool_version: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": "error",
            "message": self.message,
            "exception_type": self.exception_type,
            "stack_trace": self.stack_trace,
            "data": dict(self.request),
            "date": self.timestamp,
            "tool": "refitter",
            "version": self.tool_version,
        }
