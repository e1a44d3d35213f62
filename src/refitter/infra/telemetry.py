"""Telemetry sinks for failure reports.

Delivery is best-effort.  Sinks queue reports on :meth:`submit` and send
them on :meth:`flush`, which is bounded by a timeout.  Transport problems
are raised as :class:`~refitter.exceptions.TelemetryError` so callers can
log and drop them; they never reach the exit code.

Configuration comes from the environment:

* ``REFITTER_TELEMETRY_URL`` — endpoint receiving JSON error reports.
* ``REFITTER_TELEMETRY_API_KEY`` — optional bearer token.
* ``REFITTER_TELEMETRY_DISABLED`` — ``1``/``true``/``yes`` turns delivery off.

Without a URL, reports are only written to the debug log.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager

import httpx

from refitter.core.models import FailureReport
from refitter.core.protocols import TelemetrySink
from refitter.exceptions import TelemetryError
from refitter.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_TIMEOUT: float = 5.0
"""Seconds a flush may spend delivering queued reports."""

_TRUTHY: frozenset[str] = frozenset({"1", "true", "yes", "on"})


class HttpTelemetrySink:
    """POSTs each queued report as JSON to *url*.

    *clock* returns monotonic seconds and is only replaced in tests.
    """

    def __init__(
        self,
        url: str,
        *,
        api_key: str | None = None,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.url = url
        self._api_key = api_key
        self._transport = transport
        self._clock = clock
        self._pending: list[FailureReport] = []

    @property
    def pending(self) -> int:
        return len(self._pending)

    def submit(self, report: FailureReport) -> None:
        self._pending.append(report)

    def flush(self, timeout: float = DEFAULT_FLUSH_TIMEOUT) -> None:
        """Send queued reports until the queue is empty or *timeout* elapses.

        *timeout* is a total deadline for the whole flush.  httpx timeouts
        apply per network operation, so the deadline is also checked
        between the chunks of every response.

        Raises
        ------
        TelemetryError
            When the endpoint is unreachable, rejects a report, or the
            deadline passes with reports still queued.
        """
        if not self._pending:
            return

        headers = {"User-Agent": f"refitter/{__version__}"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        deadline = self._clock() + timeout
        with httpx.Client(transport=self._transport, headers=headers) as client:
            while self._pending:
                report = self._pending.pop(0)
                try:
                    self._post(client, report, deadline)
                except httpx.HTTPError as exc:
                    raise TelemetryError(f"Could not deliver error report to {self.url}: {exc}") from exc

    def _post(self, client: httpx.Client, report: FailureReport, deadline: float) -> None:
        remaining = self._check_deadline(deadline)
        with client.stream("POST", self.url, json=report.to_payload(), timeout=remaining) as response:
            response.raise_for_status()
            for _chunk in response.iter_raw():
                self._check_deadline(deadline)

    def _check_deadline(self, deadline: float) -> float:
        remaining = deadline - self._clock()
        if remaining <= 0:
            raise TelemetryError(
                f"Telemetry flush timed out with {len(self._pending) + 1} report(s) undelivered",
            )
        return remaining

    def close(self) -> None:
        if self._pending:
            logger.debug("Dropping %d undelivered error report(s)", len(self._pending))
        self._pending.clear()


class LoggingTelemetrySink:
    """Writes reports to the debug log instead of a remote service."""

    def __init__(self) -> None:
        self.reports: list[FailureReport] = []

    def submit(self, report: FailureReport) -> None:
        self.reports.append(report)
        logger.debug(
            "Error report: %s: %s (request=%s)",
            report.exception_type,
            report.message,
            report.request,
        )

    def flush(self, timeout: float = DEFAULT_FLUSH_TIMEOUT) -> None:
        return None

    def close(self) -> None:
        return None


def sink_from_environment(environ: Mapping[str, str] | None = None) -> TelemetrySink:
    """Build the sink described by the ``REFITTER_TELEMETRY_*`` variables."""
    env = os.environ if environ is None else environ
    url = env.get("REFITTER_TELEMETRY_URL", "").strip()
    disabled = env.get("REFITTER_TELEMETRY_DISABLED", "").strip().lower() in _TRUTHY
    if disabled or not url:
        return LoggingTelemetrySink()
    return HttpTelemetrySink(url, api_key=env.get("REFITTER_TELEMETRY_API_KEY") or None)


@contextmanager
def telemetry_session(
    sink: TelemetrySink,
    *,
    flush_timeout: float = DEFAULT_FLUSH_TIMEOUT,
) -> Iterator[TelemetrySink]:
    """Scope *sink* to one run, flushing and closing it on every exit path."""
    try:
        yield sink
    finally:
        try:
            sink.flush(flush_timeout)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Telemetry flush failed: %s", exc)
        finally:
            try:
                sink.close()
            except Exception as exc:  # noqa: BLE001
                logger.debug("Telemetry sink did not close cleanly: %s", exc)
