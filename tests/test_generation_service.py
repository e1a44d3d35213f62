"""Tests for the single engine invocation (core/generation_service.py).

The engine is faked at the protocol boundary — no documents are loaded.
"""

from __future__ import annotations

from unittest.mock import MagicMock

from conftest import FakeEngine, make_request
from refitter.core.generation_service import GenerationService
from refitter.core.models import GeneratedArtifact
from refitter.core.result import Err, Ok
from refitter.exceptions import FetchError, GenerationError, SpecParseError


class TestDelegation:
    def test_calls_engine_once_with_request(self) -> None:
        engine = FakeEngine(code="interface IApi {}")
        request = make_request()

        result = GenerationService(engine).generate(request)

        assert engine.requests == [request]
        assert isinstance(result, Ok)
        assert result.value == GeneratedArtifact(code="interface IApi {}")

    def test_accepts_any_protocol_implementation(self) -> None:
        engine = MagicMock()
        engine.generate.return_value = GeneratedArtifact(code="x")
        result = GenerationService(engine).generate(make_request())
        engine.generate.assert_called_once()
        assert isinstance(result, Ok)


class TestFailures:
    def test_fetch_error_returned_unchanged(self) -> None:
        error = FetchError("HTTP 404")
        engine = FakeEngine(error=error)

        result = GenerationService(engine).generate(make_request())

        assert isinstance(result, Err)
        assert result.error is error
        assert len(engine.requests) == 1

    def test_parse_error_returned_unchanged(self) -> None:
        error = SpecParseError("not yaml")
        result = GenerationService(FakeEngine(error=error)).generate(make_request())
        assert isinstance(result, Err)
        assert result.error is error

    def test_unexpected_error_wrapped(self) -> None:
        original = RuntimeError("kaboom")
        result = GenerationService(FakeEngine(error=original)).generate(make_request())

        assert isinstance(result, Err)
        assert isinstance(result.error, GenerationError)
        assert "Unexpected" in str(result.error)
        assert result.error.__cause__ is original

    def test_no_partial_artifact(self) -> None:
        engine = MagicMock()
        engine.generate.return_value = None
        result = GenerationService(engine).generate(make_request())
        assert isinstance(result, Err)
        assert isinstance(result.error, GenerationError)
