"""Shared pytest fixtures and configuration for the refitter test suite.

Guidelines
----------
* No internet access in any test — httpx is served by ``MockTransport``.
* The generation engine and telemetry sink are faked at the protocol
  boundary for CLI tests.
* Tests that write files work inside ``tmp_path``.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from refitter.core.models import (
    FailureReport,
    GeneratedArtifact,
    GenerationRequest,
    TypeAccessibility,
)
from refitter.exceptions import TelemetryError

PETSTORE: dict[str, Any] = {
    "openapi": "3.0.1",
    "info": {"title": "Swagger Petstore", "version": "1.0.0"},
    "paths": {
        "/pet": {
            "post": {
                "operationId": "addPet",
                "summary": "Add a new pet to the store",
                "requestBody": {
                    "required": True,
                    "content": {
                        "application/json": {"schema": {"$ref": "#/components/schemas/Pet"}},
                    },
                },
                "responses": {
                    "200": {
                        "description": "Successful operation",
                        "content": {
                            "application/json": {"schema": {"$ref": "#/components/schemas/Pet"}},
                        },
                    },
                },
            },
        },
        "/pet/findByStatus": {
            "get": {
                "operationId": "findPetsByStatus",
                "parameters": [
                    {
                        "name": "status",
                        "in": "query",
                        "schema": {"$ref": "#/components/schemas/PetStatus"},
                    },
                ],
                "responses": {
                    "200": {
                        "description": "Successful operation",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "array",
                                    "items": {"$ref": "#/components/schemas/Pet"},
                                },
                            },
                        },
                    },
                },
            },
        },
        "/pet/{petId}": {
            "get": {
                "operationId": "getPetById",
                "parameters": [
                    {
                        "name": "petId",
                        "in": "path",
                        "required": True,
                        "schema": {"type": "integer", "format": "int64"},
                    },
                ],
                "responses": {
                    "200": {
                        "description": "Successful operation",
                        "content": {
                            "application/json": {"schema": {"$ref": "#/components/schemas/Pet"}},
                        },
                    },
                },
            },
            "delete": {
                "operationId": "deletePet",
                "parameters": [
                    {"name": "api_key", "in": "header", "schema": {"type": "string"}},
                    {
                        "name": "petId",
                        "in": "path",
                        "required": True,
                        "schema": {"type": "integer", "format": "int64"},
                    },
                ],
                "responses": {"400": {"description": "Invalid pet value"}},
            },
        },
    },
    "components": {
        "schemas": {
            "PetStatus": {"type": "string", "enum": ["available", "pending", "sold"]},
            "Pet": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "id": {"type": "integer", "format": "int64"},
                    "name": {"type": "string"},
                    "status": {"$ref": "#/components/schemas/PetStatus"},
                    "tags": {"type": "array", "items": {"type": "string"}},
                },
            },
        },
    },
}


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def make_request(**overrides: Any) -> GenerationRequest:
    defaults: dict[str, Any] = {
        "openapi_path": "./openapi.json",
        "namespace": "GeneratedCode",
        "add_auto_generated_header": True,
        "generate_contracts": True,
        "return_api_response": False,
        "type_accessibility": TypeAccessibility.PUBLIC,
        "use_cancellation_tokens": False,
        "generate_operation_headers": True,
    }
    defaults.update(overrides)
    return GenerationRequest(**defaults)


# ---------------------------------------------------------------------------
# Protocol fakes
# ---------------------------------------------------------------------------

class FakeEngine:
    """Records every request; returns *code* or raises *error*."""

    def __init__(self, code: str = "// generated\n", error: BaseException | None = None) -> None:
        self.code = code
        self.error = error
        self.requests: list[GenerationRequest] = []

    def generate(self, request: GenerationRequest) -> GeneratedArtifact:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return GeneratedArtifact(code=self.code)


class RecordingSink:
    """In-memory telemetry sink; optionally fails on flush."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.submitted: list[FailureReport] = []
        self.flush_timeouts: list[float] = []
        self.closed = False

    def submit(self, report: FailureReport) -> None:
        self.submitted.append(report)

    def flush(self, timeout: float) -> None:
        self.flush_timeouts.append(timeout)
        if self.fail:
            raise TelemetryError("sink unreachable")

    def close(self) -> None:
        self.closed = True


class BrokenSink:
    """Sink whose every method fails with a non-telemetry exception."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def submit(self, report: FailureReport) -> None:
        self.calls.append("submit")
        raise RuntimeError("sink blew up")

    def flush(self, timeout: float) -> None:
        self.calls.append("flush")
        raise RuntimeError("sink blew up")

    def close(self) -> None:
        self.calls.append("close")
        raise RuntimeError("sink blew up")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def petstore() -> dict[str, Any]:
    return copy.deepcopy(PETSTORE)


@pytest.fixture()
def spec_file(tmp_path: Path, petstore: dict[str, Any]) -> Path:
    """``openapi.json`` containing the petstore document."""
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps(petstore), encoding="utf-8")
    return path


@pytest.fixture()
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()
