"""Core generation service — the single call into the generation engine.

This service delegates the actual work to a
:class:`~refitter.core.protocols.GenerationEngine` injected at
construction time.  It is responsible for:

* Invoking the engine exactly once per request.
* Turning every failure into a typed
  :class:`~refitter.exceptions.RefitterError` inside an :class:`Err`.

Guarantees
----------
* Pure orchestration — no ``print()``, no filesystem access of its own.
* No partial artifact is ever returned.
"""

from __future__ import annotations

import logging

from refitter.core.models import GeneratedArtifact, GenerationRequest
from refitter.core.protocols import GenerationEngine
from refitter.core.result import Err, Ok, Result
from refitter.exceptions import GenerationError, RefitterError

logger = logging.getLogger(__name__)


class GenerationService:
    """Stateless service that drives one generation attempt.

    Parameters
    ----------
    engine:
        Any object satisfying the :class:`GenerationEngine` protocol.
    """

    def __init__(self, engine: GenerationEngine) -> None:
        self._engine: GenerationEngine = engine

    def generate(self, request: GenerationRequest) -> Result[GeneratedArtifact, RefitterError]:
        """Run the engine for *request*.

        Returns
        -------
        Ok[GeneratedArtifact]
            When the engine produced code.
        Err[RefitterError]
            Engine errors unchanged; anything unexpected wrapped in
            :class:`GenerationError` chained to the original exception.
        """
        logger.debug("Generating code for %s", request.openapi_path)
        try:
            artifact = self._engine.generate(request)
        except RefitterError as exc:
            return Err(exc)
        except Exception as exc:
            error = GenerationError(f"Unexpected generation error: {exc}")
            error.__cause__ = exc
            return Err(error)

        if not isinstance(artifact, GeneratedArtifact):
            return Err(GenerationError("Generation engine returned no code."))

        logger.debug("Generated %d bytes", artifact.byte_length)
        return Ok(artifact)
