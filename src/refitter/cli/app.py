"""CLI application entry point and run sequencing for refitter.

This module is the **single recovery boundary** for a run.  It validates
the input reference before anything else happens, builds one generation
request, invokes the engine once, writes the output, and converts any
failure into a console diagnostic, an error report, and an exit code.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core and
  infrastructure layers.
* ``print()`` is forbidden; Rich consoles are used exclusively.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys
import textwrap

from rich.markup import escape

from refitter.cli.console import configure_logging, console, error_console
from refitter.cli.failure_reporter import FailureReporter
from refitter.core.generation_service import GenerationService
from refitter.core.input_resolver import resolve_input
from refitter.core.models import GenerationRequest, RawOptions
from refitter.core.protocols import GenerationEngine, TelemetrySink
from refitter.core.request_builder import (
    DEFAULT_NAMESPACE,
    DEFAULT_OUTPUT_PATH,
    build_request,
    resolve_output_path,
)
from refitter.core.result import Err, Result
from refitter.exceptions import ValidationError
from refitter.infra.output_writer import OutputWriter
from refitter.infra.telemetry import telemetry_session
from refitter.utils import exit_codes
from refitter.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

_EXAMPLES = textwrap.dedent(
    """\
    examples:
      refitter ./openapi.json
      refitter https://petstore3.swagger.io/api/v3/openapi.yaml
      refitter ./openapi.json --namespace "Your.Namespace.Of.Choice.GeneratedCode" --output ./GeneratedCode.cs
      refitter ./openapi.json --namespace "Your.Namespace.Of.Choice.GeneratedCode" --internal
      refitter ./openapi.json --output ./IGeneratedCode.cs --interface-only
      refitter ./openapi.json --use-api-response
      refitter ./openapi.json --cancellation-tokens
      refitter ./openapi.json --no-operation-headers
    """
)

# (flags, dest, help) for every boolean switch; all default to False.
_SWITCHES: tuple[tuple[str, str, str], ...] = (
    ("--no-auto-generated-header", "no_auto_generated_header",
     "Don't add <auto-generated> header to output file"),
    ("--interface-only", "interface_only", "Don't generate contract types"),
    ("--use-api-response", "use_api_response",
     "Return Task<IApiResponse<T>> instead of Task<T>"),
    ("--internal", "internal",
     "Set the accessibility of the generated types to 'internal'"),
    ("--cancellation-tokens", "cancellation_tokens", "Use cancellation tokens"),
    ("--no-operation-headers", "no_operation_headers", "Don't generate operation headers"),
)


def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser.

    One optional positional (validated after parsing, so a missing value
    gets the same message as a blank one) and independent named options.
    """
    parser = argparse.ArgumentParser(
        prog="refitter",
        description="Generate a Refit interface and contracts from an OpenAPI specification.",
        epilog=_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "input_ref",
        nargs="?",
        default=None,
        metavar="URL or input file",
        help="URL or file path to OpenAPI Specification file",
    )
    parser.add_argument(
        "-n",
        "--namespace",
        default=DEFAULT_NAMESPACE,
        help=f"Default namespace to use for generated types (default: {DEFAULT_NAMESPACE})",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=DEFAULT_OUTPUT_PATH,
        help=f"Path to Output file (default: {DEFAULT_OUTPUT_PATH})",
    )
    for flag, dest, help_text in _SWITCHES:
        parser.add_argument(flag, dest=dest, action="store_true", default=False, help=help_text)
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Log progress and telemetry details to stderr",
    )
    return parser


# ---------------------------------------------------------------------------
# Run stages
# ---------------------------------------------------------------------------

def _render_validation_error(exc: ValidationError) -> None:
    error_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    if exc.hint:
        error_console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")


def _generate_and_write(
    request: GenerationRequest,
    output_path: str,
    engine: GenerationEngine,
) -> Result[int, BaseException]:
    """Exactly one generation attempt; the file is written only on success."""
    try:
        generated = GenerationService(engine).generate(request)
        if isinstance(generated, Err):
            return generated
        return OutputWriter().write(generated.value, output_path)
    except Exception as exc:  # noqa: BLE001
        return Err(exc)


def _run(
    request: GenerationRequest,
    output_path: str,
    *,
    engine: GenerationEngine,
    sink: TelemetrySink,
) -> int:
    """Invoke, write, and report."""
    with telemetry_session(sink) as active_sink:
        outcome = _generate_and_write(request, output_path, engine)
        if isinstance(outcome, Err):
            return FailureReporter(active_sink).report(outcome.error, request)

    console.print(f"[green]Output: {outcome.value} bytes[/green]")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: list[str] | None = None,
    *,
    engine: GenerationEngine | None = None,
    sink: TelemetrySink | None = None,
) -> int:
    """Run the refitter CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.
    engine:
        Generation engine; defaults to :class:`~refitter.infra.refit_engine.RefitEngine`.
    sink:
        Telemetry sink; defaults to the one configured by the environment.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    options = RawOptions.from_namespace(args)

    try:
        resolve_input(options.input_ref)
    except ValidationError as exc:
        _render_validation_error(exc)
        return exc.exit_code

    request = build_request(options)

    if engine is None:
        from refitter.infra.refit_engine import RefitEngine

        engine = RefitEngine()
    if sink is None:
        from refitter.infra.telemetry import sink_from_environment

        sink = sink_from_environment()

    return _run(request, resolve_output_path(options), engine=engine, sink=sink)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        error_console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
