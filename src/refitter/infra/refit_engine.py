"""Refit interface generator — the concrete generation engine.

Satisfies :class:`~refitter.core.protocols.GenerationEngine`.  One call
to :meth:`RefitEngine.generate` loads the document, walks its paths and
component schemas and emits a single C# file containing a Refit
interface and, unless disabled, its contract types.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import jsonref

from refitter.core.models import GeneratedArtifact, GenerationRequest
from refitter.exceptions import GenerationError, RefitterError
from refitter.infra import csharp
from refitter.infra.spec_loader import LoadedSpec, SpecLoader
from refitter.version import __version__

logger = logging.getLogger(__name__)

HTTP_METHODS: tuple[str, ...] = ("get", "put", "post", "delete", "options", "head", "patch")

_JSON_MEDIA_TYPES: tuple[str, ...] = ("application/json", "text/json", "application/*+json")

INDENT = "    "


@dataclass
class _Parameter:
    declaration: str
    order: int
    name: str


@dataclass
class _Operation:
    method: str
    path: str
    name: str
    return_type: str | None
    parameters: list[_Parameter] = field(default_factory=list)
    summary: str = ""
    multipart: bool = False


class RefitEngine:
    """Generate Refit client code for a :class:`GenerationRequest`.

    Parameters
    ----------
    loader:
        Source of parsed documents.  Defaults to a network-capable
        :class:`SpecLoader`.
    """

    def __init__(self, loader: SpecLoader | None = None) -> None:
        self._loader = loader or SpecLoader()

    def generate(self, request: GenerationRequest) -> GeneratedArtifact:
        spec = self._loader.load(request.openapi_path)
        try:
            code = _Emitter(spec, request).emit()
        except RefitterError:
            raise
        except jsonref.JsonRefError as exc:
            ref = exc.reference.get("$ref") if isinstance(exc.reference, Mapping) else exc.reference
            raise GenerationError(
                f"Unresolvable schema reference '{ref}': {exc.message}",
            ) from exc
        return GeneratedArtifact(code=code)


# ---------------------------------------------------------------------------
# Emission
# ---------------------------------------------------------------------------

class _Emitter:
    def __init__(self, spec: LoadedSpec, request: GenerationRequest) -> None:
        self.document = spec.document
        self.swagger2 = spec.is_swagger2
        self.request = request
        self.types = csharp.TypeMapper()
        self.access = request.type_accessibility.keyword

    def emit(self) -> str:
        # Enum names decide which optional parameters become nullable.
        self._register_enums()
        operations = list(self._operations())
        contracts = self._contracts() if self.request.generate_contracts else []

        lines: list[str] = []
        if self.request.add_auto_generated_header:
            lines += [
                "// <auto-generated>",
                f"//     This code was generated by Refitter {__version__}.",
                "// </auto-generated>",
                "",
                "",
            ]
        lines += self._usings()
        lines += ["", f"namespace {self.request.namespace}", "{"]
        lines += self._interface(operations)
        lines.append("}")
        if contracts:
            lines += ["", f"namespace {self.request.namespace}", "{"]
            lines += contracts
            lines.append("}")
        return "\n".join(lines) + "\n"

    def _usings(self) -> list[str]:
        usings = [
            "using Refit;",
            "using System;",
            "using System.Collections.Generic;",
            "using System.Text.Json.Serialization;",
        ]
        if self.request.use_cancellation_tokens:
            usings.append("using System.Threading;")
        usings.append("using System.Threading.Tasks;")
        return usings

    # ------------------------------------------------------------------
    # Interface
    # ------------------------------------------------------------------

    def _interface_name(self) -> str:
        info = self.document.get("info") or {}
        title = str(info.get("title") or "").strip()
        return "I" + (csharp.pascal_case(title) if title else "ApiClient")

    def _interface(self, operations: list[_Operation]) -> list[str]:
        info = self.document.get("info") or {}
        lines: list[str] = []
        description = str(info.get("description") or "").strip()
        if description:
            lines += _summary(description, INDENT)
        lines += [f"{INDENT}{self.access} partial interface {self._interface_name()}", f"{INDENT}{{"]

        for index, operation in enumerate(operations):
            if index:
                lines.append("")
            member = INDENT * 2
            if operation.summary:
                lines += _summary(operation.summary, member)
            if operation.multipart:
                lines.append(f"{member}[Multipart]")
            lines.append(f'{member}[{operation.method}({csharp.quote(operation.path)})]')
            parameters = ", ".join(
                parameter.declaration
                for parameter in sorted(operation.parameters, key=lambda p: p.order)
            )
            lines.append(
                f"{member}{self._task_type(operation.return_type)} {operation.name}({parameters});"
            )

        lines.append(f"{INDENT}}}")
        return lines

    def _task_type(self, return_type: str | None) -> str:
        if self.request.return_api_response:
            return "Task<IApiResponse>" if return_type is None else f"Task<IApiResponse<{return_type}>>"
        return "Task" if return_type is None else f"Task<{return_type}>"

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _operations(self) -> Iterator[_Operation]:
        seen: dict[str, str] = {}
        for path, path_item in self.document["paths"].items():
            if not isinstance(path_item, Mapping):
                continue
            shared = list(path_item.get("parameters") or [])
            for method in HTTP_METHODS:
                operation = path_item.get(method)
                if not isinstance(operation, Mapping):
                    continue
                built = self._operation(path, method, operation, shared)
                where = f"{method.upper()} {path}"
                if built.name in seen:
                    raise GenerationError(
                        f"Duplicate operation name '{built.name}' for {where} and {seen[built.name]}",
                        hint="Give each operation a unique operationId.",
                    )
                seen[built.name] = where
                yield built

    def _operation(
        self,
        path: str,
        method: str,
        operation: Mapping[str, Any],
        shared: list[Any],
    ) -> _Operation:
        operation_id = str(operation.get("operationId") or "")
        name = csharp.pascal_case(operation_id or f"{method} {path}")
        built = _Operation(
            method=method.capitalize(),
            path=path,
            name=name,
            return_type=self._return_type(operation.get("responses") or {}),
            summary=str(operation.get("summary") or operation.get("description") or "").strip(),
        )

        for parameter in _merge_parameters(shared, operation.get("parameters") or []):
            self._add_parameter(built, parameter)

        if not self.swagger2 and operation.get("requestBody") is not None:
            self._add_request_body(built, operation["requestBody"])

        if self.request.use_cancellation_tokens:
            built.parameters.append(
                _Parameter("CancellationToken cancellationToken = default", order=9, name="cancellationToken")
            )
        _check_parameter_names(built)
        return built

    def _add_parameter(self, operation: _Operation, parameter: Mapping[str, Any]) -> None:
        location = parameter.get("in")
        original = str(parameter.get("name") or "")
        required = bool(parameter.get("required")) or location == "path"
        schema = parameter.get("schema") if "schema" in parameter else parameter
        name = csharp.identifier(original)
        type_name = self.types.map(schema, nullable=not required)

        if location == "path":
            operation.parameters.append(
                _Parameter(_with_alias(f"{type_name} {name}", original, name), order=0, name=name)
            )
        elif location == "query":
            attribute = "[Query]" if _alias_free(original, name) else f'[Query, AliasAs({csharp.quote(original)})]'
            operation.parameters.append(_Parameter(f"{attribute} {type_name} {name}", order=1, name=name))
        elif location == "header":
            if self.request.generate_operation_headers:
                operation.parameters.append(
                    _Parameter(f"[Header({csharp.quote(original)})] {type_name} {name}", order=2, name=name)
                )
        elif location == "body":
            operation.parameters.append(
                _Parameter(f"[Body] {self.types.map(parameter.get('schema'))} body", order=3, name="body")
            )
        elif location == "formData":
            operation.multipart = True
            operation.parameters.append(
                _Parameter(f"[AliasAs({csharp.quote(original)})] {type_name} {name}", order=3, name=name)
            )
        else:
            raise GenerationError(
                f"Unsupported parameter location '{location}' for '{original}' in {operation.name}",
            )

    def _add_request_body(self, operation: _Operation, body: Mapping[str, Any]) -> None:
        content = body.get("content") or {}
        if not content:
            return
        media_type = _preferred_media_type(content)
        schema = (content.get(media_type) or {}).get("schema")

        if media_type == "multipart/form-data":
            operation.multipart = True
            target = csharp.dereference(schema) if schema is not None else {}
            for original, part in (target.get("properties") or {}).items():
                name = csharp.identifier(original)
                operation.parameters.append(
                    _Parameter(
                        f"[AliasAs({csharp.quote(original)})] {self.types.map(part)} {name}",
                        order=3,
                        name=name,
                    )
                )
            return

        if media_type == "application/x-www-form-urlencoded":
            declaration = "[Body(BodySerializationMethod.UrlEncoded)] IDictionary<string, object> body"
        elif media_type == "application/octet-stream":
            declaration = "[Body] System.IO.Stream body"
        elif _is_json(media_type):
            declaration = f"[Body] {self.types.map(schema)} body"
        else:
            declaration = "[Body] string body"
        operation.parameters.append(_Parameter(declaration, order=3, name="body"))

    def _return_type(self, responses: Mapping[Any, Any]) -> str | None:
        # YAML loads bare status codes as integers.
        by_code = {str(code): response for code, response in responses.items()}
        for code in sorted(code for code in by_code if code.startswith("2")):
            response = by_code[code]
            if not isinstance(response, Mapping):
                continue
            if self.swagger2:
                schema = response.get("schema")
            else:
                content = response.get("content") or {}
                if not content:
                    continue
                schema = (content.get(_preferred_media_type(content)) or {}).get("schema")
            if schema is None:
                continue
            type_name = self.types.map(schema)
            return "System.IO.Stream" if type_name == "StreamPart" else type_name
        return None

    # ------------------------------------------------------------------
    # Contracts
    # ------------------------------------------------------------------

    def _component_schemas(self) -> Mapping[str, Any]:
        if self.swagger2:
            return self.document.get("definitions") or {}
        return (self.document.get("components") or {}).get("schemas") or {}

    def _register_enums(self) -> None:
        for raw_name, schema in self._component_schemas().items():
            target = csharp.dereference(schema)
            if isinstance(target, Mapping) and csharp.is_enum_schema(target):
                self.types.enum_names.add(csharp.pascal_case(raw_name))

    def _contracts(self) -> list[str]:
        schemas = self._component_schemas()
        lines: list[str] = []
        for raw_name, schema in schemas.items():
            target = csharp.dereference(schema)
            if not isinstance(target, Mapping) or not csharp.is_contract_schema(target):
                continue
            if lines:
                lines.append("")
            name = csharp.pascal_case(raw_name)
            if csharp.is_enum_schema(target):
                lines += self._enum(name, target)
            else:
                lines += self._class(name, target)
        return lines

    def _enum(self, name: str, schema: Mapping[str, Any]) -> list[str]:
        lines = _summary(str(schema.get("description") or ""), INDENT)
        numeric = schema.get("type") == "integer"
        if not numeric:
            lines.append(f"{INDENT}[JsonConverter(typeof(JsonStringEnumConverter))]")
        lines += [f"{INDENT}{self.access} enum {name}", f"{INDENT}{{"]
        members: list[str] = []
        for value in schema["enum"]:
            if value is None:
                continue
            member = csharp.enum_member_name(value)
            if numeric:
                members.append(f"{INDENT * 2}{member} = {value},")
            else:
                members.append(
                    f'{INDENT * 2}[System.Runtime.Serialization.EnumMember(Value = {csharp.quote(str(value))})]'
                )
                members.append(f"{INDENT * 2}{member},")
        lines += members
        lines.append(f"{INDENT}}}")
        return lines

    def _class(self, name: str, schema: Mapping[str, Any]) -> list[str]:
        base: str | None = None
        properties: dict[str, Any] = {}
        required: set[str] = set(schema.get("required") or [])
        for part in schema.get("allOf") or []:
            if csharp.is_reference(part) and base is None:
                base = self.types.map(part)
                continue
            target = csharp.dereference(part)
            properties.update(target.get("properties") or {})
            required.update(target.get("required") or [])
        properties.update(schema.get("properties") or {})

        lines = _summary(str(schema.get("description") or ""), INDENT)
        inheritance = f" : {base}" if base else ""
        lines += [f"{INDENT}{self.access} partial class {name}{inheritance}", f"{INDENT}{{"]
        for index, (original, property_schema) in enumerate(properties.items()):
            if index:
                lines.append("")
            member = INDENT * 2
            plain = csharp.dereference(property_schema)
            if isinstance(plain, Mapping) and plain.get("description"):
                lines += _summary(str(plain["description"]), member)
            property_name = csharp.pascal_case(original)
            if property_name == name:
                property_name += "Value"
            nullable = original not in required or bool(
                isinstance(plain, Mapping) and plain.get("nullable")
            )
            type_name = self.types.map(property_schema, nullable=nullable)
            lines.append(f"{member}[JsonPropertyName({csharp.quote(original)})]")
            lines.append(f"{member}public {type_name} {property_name} {{ get; set; }}")
        lines.append(f"{INDENT}}}")
        return lines


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _summary(text: str, indent: str) -> list[str]:
    text = text.strip()
    if not text:
        return []
    lines = [f"{indent}/// <summary>"]
    lines += [f"{indent}/// {csharp.xml_doc(line.rstrip())}".rstrip() for line in text.splitlines()]
    lines.append(f"{indent}/// </summary>")
    return lines


def _alias_free(original: str, name: str) -> bool:
    return original == name.lstrip("@")


def _with_alias(declaration: str, original: str, name: str) -> str:
    if _alias_free(original, name):
        return declaration
    return f"[AliasAs({csharp.quote(original)})] {declaration}"


def _is_json(media_type: str) -> bool:
    base = media_type.split(";", 1)[0].strip().lower()
    return base in _JSON_MEDIA_TYPES or base.endswith("+json")


def _preferred_media_type(content: Mapping[str, Any]) -> str:
    for media_type in content:
        if _is_json(media_type):
            return media_type
    return next(iter(content))


def _merge_parameters(shared: list[Any], own: list[Any]) -> list[Mapping[str, Any]]:
    """Path-level parameters overridden by operation-level ones with the same name and location."""
    merged: dict[tuple[str, str], Mapping[str, Any]] = {}
    for parameter in [*shared, *own]:
        plain = csharp.dereference(parameter)
        if not isinstance(plain, Mapping):
            continue
        merged[(str(plain.get("name")), str(plain.get("in")))] = parameter
    return list(merged.values())


def _check_parameter_names(operation: _Operation) -> None:
    seen: set[str] = set()
    for parameter in operation.parameters:
        if parameter.name in seen:
            raise GenerationError(
                f"Duplicate parameter name '{parameter.name}' in {operation.name}",
                hint="Rename one of the parameters so their C# names differ.",
            )
        seen.add(parameter.name)
