"""Failure reporting: console diagnostic plus a telemetry error report.

Rendering lives in the CLI layer because it talks to the user; the
telemetry sink is injected so tests and the environment decide where
reports go.
"""

from __future__ import annotations

import datetime
import logging
import traceback

from rich.markup import escape

from refitter.cli.console import error_console
from refitter.core.models import FailureReport, GenerationRequest
from refitter.core.protocols import TelemetrySink
from refitter.exceptions import RefitterError
from refitter.infra.telemetry import DEFAULT_FLUSH_TIMEOUT
from refitter.utils import exit_codes
from refitter.version import __version__

logger = logging.getLogger(__name__)


def format_stack_trace(error: BaseException) -> str:
    """Full traceback of *error*, including chained causes."""
    return "".join(traceback.format_exception(type(error), error, error.__traceback__)).rstrip()


def build_report(error: BaseException, request: GenerationRequest) -> FailureReport:
    """Snapshot *error* and the active *request* for telemetry."""
    return FailureReport(
        message=str(error),
        exception_type=type(error).__name__,
        stack_trace=format_stack_trace(error),
        request=request.to_attributes(),
        timestamp=datetime.datetime.now(datetime.timezone.utc).isoformat(),
        tool_version=__version__,
    )


class FailureReporter:
    """Print a two-part diagnostic and submit an error report.

    Parameters
    ----------
    sink:
        Destination for :class:`FailureReport` objects.
    flush_timeout:
        Upper bound, in seconds, for delivering the report before the
        process exits.
    """

    def __init__(self, sink: TelemetrySink, *, flush_timeout: float = DEFAULT_FLUSH_TIMEOUT) -> None:
        self._sink = sink
        self._flush_timeout = flush_timeout

    def report(self, error: BaseException, request: GenerationRequest) -> int:
        """Render *error*, send it to telemetry and return the exit code."""
        message = str(error)
        if isinstance(error, RefitterError) and error.hint:
            message = f"{message}\n{error.hint}"
        error_console.print(f"[red]Error:\n{escape(message)}[/red]")
        error_console.print(f"[yellow]Stack Trace:\n{escape(format_stack_trace(error))}[/yellow]")

        try:
            self._sink.submit(build_report(error, request))
            self._sink.flush(self._flush_timeout)
        except Exception as exc:  # noqa: BLE001
            # A broken sink must not replace the error being reported.
            logger.debug("Error report not delivered: %s", exc)

        if isinstance(error, RefitterError):
            return error.exit_code
        return exit_codes.UNEXPECTED_ERROR
