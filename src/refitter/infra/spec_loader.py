"""Fetch and parse OpenAPI documents.

This module is the **only** place in the codebase that talks to httpx,
PyYAML and jsonref for specification input.  Every third-party error is
caught here and re-raised as a typed
:class:`~refitter.exceptions.RefitterError` subclass.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
import jsonref
import yaml

from refitter.core.input_resolver import is_remote_reference
from refitter.exceptions import FetchError, SpecParseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoadedSpec:
    """A parsed document whose ``$ref`` entries are lazy jsonref proxies."""

    document: dict[str, Any]
    base_uri: str

    @property
    def is_swagger2(self) -> bool:
        return str(self.document.get("swagger", "")).startswith("2")


class SpecLoader:
    """Read a specification from a URL or a local file.

    Parameters
    ----------
    transport:
        Optional httpx transport, used by tests to serve documents
        without network access.
    """

    def __init__(self, transport: httpx.BaseTransport | None = None) -> None:
        self._transport = transport

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self, reference: str) -> LoadedSpec:
        """Return the parsed document named by *reference*.

        Raises
        ------
        FetchError
            When the document cannot be downloaded or read.
        SpecParseError
            When the content is not an OpenAPI / Swagger document.
        """
        if is_remote_reference(reference):
            base_uri = reference.strip()
            text = self._fetch(base_uri)
        else:
            path = Path(reference).resolve()
            base_uri = path.as_uri()
            text = self._read(path)

        raw = self._parse(text, reference)
        document = jsonref.replace_refs(raw, base_uri=base_uri, lazy_load=True, merge_props=False)
        return LoadedSpec(document=document, base_uri=base_uri)

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    def _fetch(self, url: str) -> str:
        logger.debug("Fetching specification from %s", url)
        try:
            with httpx.Client(transport=self._transport, follow_redirects=True) as client:
                response = client.get(url)
        except httpx.HTTPError as exc:
            raise FetchError(
                f"Could not download {url}: {exc}",
                hint="Check the URL and your network connection.",
            ) from exc

        if response.status_code != 200:
            raise FetchError(
                f"Could not download {url}: HTTP {response.status_code} {response.reason_phrase}",
            )
        return response.text

    @staticmethod
    def _read(path: Path) -> str:
        logger.debug("Reading specification from %s", path)
        try:
            return path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise FetchError(f"Could not read {path}: {exc}") from exc

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @staticmethod
    def _parse(text: str, reference: str) -> dict[str, Any]:
        """Decode JSON (when it looks like JSON) or YAML into a document dict."""
        stripped = text.lstrip()
        try:
            if stripped.startswith(("{", "[")):
                raw: Any = json.loads(stripped)
            else:
                raw = yaml.safe_load(stripped)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise SpecParseError(f"Could not parse {reference}: {exc}") from exc

        if not isinstance(raw, dict):
            raise SpecParseError(f"{reference} does not contain an OpenAPI document.")
        if "openapi" not in raw and "swagger" not in raw:
            raise SpecParseError(
                f"{reference} is missing the 'openapi' or 'swagger' version field.",
            )
        if not isinstance(raw.get("paths"), dict):
            raise SpecParseError(f"{reference} does not define any paths.")
        return raw
