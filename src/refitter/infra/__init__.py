"""Infrastructure layer — external system integration.

This layer wraps all interaction with the network (httpx), document
parsing (PyYAML, jsonref), the filesystem, and telemetry delivery.  Every
raw third-party exception must be caught here and re-raised as a
:class:`~refitter.exceptions.RefitterError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from refitter.infra.output_writer import OutputWriter
from refitter.infra.refit_engine import RefitEngine
from refitter.infra.spec_loader import LoadedSpec, SpecLoader
from refitter.infra.telemetry import (
    HttpTelemetrySink,
    LoggingTelemetrySink,
    sink_from_environment,
    telemetry_session,
)

__all__: list[str] = [
    "HttpTelemetrySink",
    "LoadedSpec",
    "LoggingTelemetrySink",
    "OutputWriter",
    "RefitEngine",
    "SpecLoader",
    "sink_from_environment",
    "telemetry_session",
]
