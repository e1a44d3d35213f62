"""Pre-flight classification of the input reference.

An input is a *remote reference* if and only if it is an absolute URI
with an ``http`` or ``https`` scheme; anything else is a *local path*.
Local paths must exist before a request is built; remote references are
not contacted here — fetch failures surface later from the engine.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlsplit

from refitter.core.models import InputKind, ResolvedInput
from refitter.exceptions import ValidationError

logger = logging.getLogger(__name__)

_REMOTE_SCHEMES: frozenset[str] = frozenset({"http", "https"})


def is_remote_reference(reference: str) -> bool:
    """Return ``True`` when *reference* is an absolute http(s) URI."""
    try:
        parts = urlsplit(reference.strip())
    except ValueError:
        return False
    return parts.scheme.lower() in _REMOTE_SCHEMES and bool(parts.netloc)


def resolve_input(reference: str | None) -> ResolvedInput:
    """Classify *reference* and check that local files exist.

    Raises
    ------
    ValidationError
        If *reference* is missing or blank, or names a local file that
        does not exist.  The message carries the absolute path.
    """
    if reference is None or not reference.strip():
        raise ValidationError(
            "Input file is required",
            hint="Pass the URL or path of an OpenAPI specification.",
        )

    if is_remote_reference(reference):
        logger.debug("Input %s classified as remote reference", reference)
        return ResolvedInput(reference=reference, kind=InputKind.REMOTE_REFERENCE)

    absolute = Path(reference).resolve()
    if not absolute.is_file():
        raise ValidationError(f"File not found - {absolute}")

    logger.debug("Input %s resolved to local file %s", reference, absolute)
    return ResolvedInput(
        reference=reference,
        kind=InputKind.LOCAL_PATH,
        absolute_path=absolute,
    )
