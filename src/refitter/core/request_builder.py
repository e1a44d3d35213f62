"""Map command-line options onto a :class:`GenerationRequest`.

Pure and total: no I/O, no failure path.  Negative ``no-X`` switches are
inverted into positive request fields through :data:`TOGGLE_MAP` so the
mapping stays visible in one place.
"""

from __future__ import annotations

from refitter.core.models import GenerationRequest, RawOptions, TypeAccessibility

DEFAULT_NAMESPACE: str = "GeneratedCode"
DEFAULT_OUTPUT_PATH: str = "Output.cs"

TOGGLE_MAP: tuple[tuple[str, str, bool], ...] = (
    # (RawOptions field, GenerationRequest field, inverted)
    ("no_auto_generated_header", "add_auto_generated_header", True),
    ("interface_only", "generate_contracts", True),
    ("use_api_response", "return_api_response", False),
    ("cancellation_tokens", "use_cancellation_tokens", False),
    ("no_operation_headers", "generate_operation_headers", True),
)


def _or_default(value: str | None, default: str) -> str:
    if value is None or not value.strip():
        return default
    return value


def build_request(options: RawOptions) -> GenerationRequest:
    """Return the normalized request for *options*.

    The input reference must already have passed
    :func:`~refitter.core.input_resolver.resolve_input`.
    """
    toggles = {
        request_field: getattr(options, option_field) != inverted
        for option_field, request_field, inverted in TOGGLE_MAP
    }
    accessibility = TypeAccessibility.INTERNAL if options.internal else TypeAccessibility.PUBLIC

    return GenerationRequest(
        openapi_path=options.input_ref or "",
        namespace=_or_default(options.namespace, DEFAULT_NAMESPACE),
        type_accessibility=accessibility,
        **toggles,
    )


def resolve_output_path(options: RawOptions) -> str:
    """Destination for the generated file, defaulting to ``Output.cs``."""
    return _or_default(options.output_path, DEFAULT_OUTPUT_PATH)
