"""Tests for atomic output writing (infra/output_writer.py)."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from refitter.core.models import GeneratedArtifact
from refitter.core.result import Err, Ok
from refitter.exceptions import WriteError
from refitter.infra.output_writer import OutputWriter


class TestWrite:
    def test_writes_exact_payload(self, tmp_path: Path) -> None:
        target = tmp_path / "Output.cs"
        artifact = GeneratedArtifact(code="namespace GeneratedCode\n{\n}\n")

        result = OutputWriter().write(artifact, target)

        assert isinstance(result, Ok)
        assert target.read_text(encoding="utf-8") == artifact.code
        assert result.value == artifact.byte_length

    def test_reports_utf8_byte_count(self, tmp_path: Path) -> None:
        target = tmp_path / "Output.cs"
        artifact = GeneratedArtifact(code="// Café ☕\n")

        result = OutputWriter().write(artifact, target)

        assert isinstance(result, Ok)
        assert result.value == len(target.read_bytes())
        assert result.value == artifact.byte_length

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "Output.cs"
        target.write_text("old content that is longer than the new one", encoding="utf-8")

        OutputWriter().write(GeneratedArtifact(code="new"), target)

        assert target.read_text(encoding="utf-8") == "new"

    def test_relative_destination(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        result = OutputWriter().write(GeneratedArtifact(code="x"), "Output.cs")
        assert isinstance(result, Ok)
        assert (tmp_path / "Output.cs").read_text(encoding="utf-8") == "x"

    def test_leaves_no_temporary_files(self, tmp_path: Path) -> None:
        OutputWriter().write(GeneratedArtifact(code="x"), tmp_path / "Output.cs")
        assert [p.name for p in tmp_path.iterdir()] == ["Output.cs"]


class TestWriteFailures:
    def test_missing_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "missing" / "Output.cs"

        result = OutputWriter().write(GeneratedArtifact(code="x"), target)

        assert isinstance(result, Err)
        assert isinstance(result.error, WriteError)
        assert not target.exists()

    def test_failed_replace_keeps_previous_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        target = tmp_path / "Output.cs"
        target.write_text("previous", encoding="utf-8")

        def _fail(*_args: object) -> None:
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(os, "replace", _fail)

        result = OutputWriter().write(GeneratedArtifact(code="new"), target)

        assert isinstance(result, Err)
        assert isinstance(result.error, WriteError)
        assert "Permission denied" in str(result.error)
        assert target.read_text(encoding="utf-8") == "previous"
        assert [p.name for p in tmp_path.iterdir()] == ["Output.cs"]

    def test_destination_is_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "Output.cs"
        target.mkdir()

        result = OutputWriter().write(GeneratedArtifact(code="x"), target)

        assert isinstance(result, Err)
        assert target.is_dir()
