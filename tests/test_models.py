"""Tests for domain models (core/models.py) and the result type.

All models are frozen dataclasses — these tests verify immutability,
equality semantics, and serialization for telemetry.
"""

from __future__ import annotations

import argparse
import dataclasses
import json

import pytest

from conftest import make_request
from refitter.core.models import (
    FailureReport,
    GeneratedArtifact,
    InputKind,
    RawOptions,
    ResolvedInput,
    TypeAccessibility,
)
from refitter.core.result import Err, Ok
from refitter.exceptions import GenerationError


# ---------------------------------------------------------------------------
# RawOptions
# ---------------------------------------------------------------------------

class TestRawOptions:
    def test_defaults(self) -> None:
        options = RawOptions(input_ref="spec.json")
        assert options.namespace is None
        assert options.output_path is None
        assert not any(
            (
                options.no_auto_generated_header,
                options.interface_only,
                options.use_api_response,
                options.internal,
                options.cancellation_tokens,
                options.no_operation_headers,
            )
        )

    def test_frozen(self) -> None:
        options = RawOptions(input_ref="spec.json")
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.internal = True  # type: ignore[misc]

    def test_from_namespace_ignores_unrelated_attributes(self) -> None:
        args = argparse.Namespace(
            input_ref="spec.json",
            namespace="My.Api",
            output="Api.cs",
            no_auto_generated_header=True,
            interface_only=False,
            use_api_response=True,
            internal=False,
            cancellation_tokens=True,
            no_operation_headers=False,
            verbose=True,
        )
        options = RawOptions.from_namespace(args)
        assert options == RawOptions(
            input_ref="spec.json",
            namespace="My.Api",
            output_path="Api.cs",
            no_auto_generated_header=True,
            use_api_response=True,
            cancellation_tokens=True,
        )


# ---------------------------------------------------------------------------
# ResolvedInput / TypeAccessibility
# ---------------------------------------------------------------------------

class TestResolvedInput:
    def test_remote_flag(self) -> None:
        resolved = ResolvedInput(reference="https://x.test/a.json", kind=InputKind.REMOTE_REFERENCE)
        assert resolved.is_remote
        assert resolved.absolute_path is None

    def test_local_flag(self) -> None:
        resolved = ResolvedInput(reference="a.json", kind=InputKind.LOCAL_PATH)
        assert not resolved.is_remote


class TestTypeAccessibility:
    def test_values(self) -> None:
        assert TypeAccessibility.PUBLIC.value == "Public"
        assert TypeAccessibility.INTERNAL.value == "Internal"

    def test_keyword(self) -> None:
        assert TypeAccessibility.PUBLIC.keyword == "public"
        assert TypeAccessibility.INTERNAL.keyword == "internal"


# ---------------------------------------------------------------------------
# GenerationRequest
# ---------------------------------------------------------------------------

class TestGenerationRequest:
    def test_frozen(self) -> None:
        request = make_request()
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.namespace = "Other"  # type: ignore[misc]

    def test_equality(self) -> None:
        assert make_request() == make_request()

    def test_to_attributes_is_json_safe(self) -> None:
        attributes = make_request(type_accessibility=TypeAccessibility.INTERNAL).to_attributes()
        assert attributes["type_accessibility"] == "Internal"
        assert attributes["openapi_path"] == "./openapi.json"
        assert set(attributes) == {
            "openapi_path",
            "namespace",
            "add_auto_generated_header",
            "generate_contracts",
            "return_api_response",
            "type_accessibility",
            "use_cancellation_tokens",
            "generate_operation_headers",
        }
        json.dumps(attributes)


# ---------------------------------------------------------------------------
# GeneratedArtifact / FailureReport
# ---------------------------------------------------------------------------

class TestGeneratedArtifact:
    def test_byte_length_ascii(self) -> None:
        assert GeneratedArtifact(code="abc").byte_length == 3

    def test_byte_length_counts_utf8_bytes(self) -> None:
        assert GeneratedArtifact(code="é").byte_length == 2


class TestFailureReport:
    def test_payload(self) -> None:
        report = FailureReport(
            message="boom",
            exception_type="GenerationError",
            stack_trace="Traceback...",
            request={"namespace": "GeneratedCode"},
            timestamp="2026-01-01T00:00:00+00:00",
            tool_version="0.4.0",
        )
        payload = report.to_payload()
        assert payload["message"] == "boom"
        assert payload["data"] == {"namespace": "GeneratedCode"}
        assert payload["tool"] == "refitter"
        json.dumps(payload)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

class TestResult:
    def test_ok(self) -> None:
        result = Ok(3)
        assert result.ok
        assert result.value == 3

    def test_err(self) -> None:
        error = GenerationError("boom")
        result = Err(error)
        assert not result.ok
        assert result.error is error
