"""C# naming and type-mapping helpers used by the Refit engine.

Schemas reach these functions with ``$ref`` entries still wrapped in
jsonref proxies, which is how a referenced schema keeps its component
name.  Dereferencing a proxy may raise :class:`jsonref.JsonRefError`;
callers translate that into a generation error.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote

import jsonref

CSHARP_KEYWORDS: frozenset[str] = frozenset({
    "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char",
    "checked", "class", "const", "continue", "decimal", "default", "delegate",
    "do", "double", "else", "enum", "event", "explicit", "extern", "false",
    "finally", "fixed", "float", "for", "foreach", "goto", "if", "implicit",
    "in", "int", "interface", "internal", "is", "lock", "long", "namespace",
    "new", "null", "object", "operator", "out", "override", "params",
    "private", "protected", "public", "readonly", "ref", "return", "sbyte",
    "sealed", "short", "sizeof", "stackalloc", "static", "string", "struct",
    "switch", "this", "throw", "true", "try", "typeof", "uint", "ulong",
    "unchecked", "unsafe", "ushort", "using", "virtual", "void", "volatile",
    "while",
})

VALUE_TYPES: frozenset[str] = frozenset({
    "bool", "int", "long", "float", "double", "decimal", "DateTimeOffset", "Guid",
})

_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------

def pascal_case(text: str) -> str:
    """``"find pets-by_status"`` → ``"FindPetsByStatus"``; keeps inner capitals."""
    words = [word for word in _WORD_SPLIT.split(text) if word]
    name = "".join(word[0].upper() + word[1:] for word in words)
    if not name:
        return "_"
    if name[0].isdigit():
        name = f"_{name}"
    return name


def camel_case(text: str) -> str:
    name = pascal_case(text)
    if name.startswith("_"):
        return name
    return name[0].lower() + name[1:]


def identifier(text: str) -> str:
    """A camelCase identifier that is safe to use as a C# parameter name."""
    name = camel_case(text)
    return f"@{name}" if name in CSHARP_KEYWORDS else name


def enum_member_name(value: Any) -> str:
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, (int, float)):
        return f"_{value}".replace("-", "Minus").replace(".", "_")
    return pascal_case(str(value))


def quote(value: str) -> str:
    """C# string literal for *value*."""
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def xml_doc(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------

def is_reference(schema: Any) -> bool:
    return isinstance(schema, jsonref.JsonRef)


def reference_name(schema: jsonref.JsonRef) -> str:
    """Type name for a ``$ref`` proxy: the last pointer segment, or the file stem."""
    ref: str = schema.__reference__["$ref"]
    uri, _, fragment = ref.partition("#")
    if fragment.strip("/"):
        segment = fragment.rstrip("/").rsplit("/", 1)[-1]
        segment = unquote(segment).replace("~1", "/").replace("~0", "~")
    else:
        segment = uri.rsplit("/", 1)[-1].split(".", 1)[0]
    return pascal_case(segment)


def dereference(schema: Any) -> Any:
    """Force a jsonref proxy to load its target and return the plain value."""
    if is_reference(schema):
        return schema.__subject__
    return schema


# ---------------------------------------------------------------------------
# Type mapping
# ---------------------------------------------------------------------------

def is_contract_schema(schema: Mapping[str, Any]) -> bool:
    """Whether a named schema is emitted as a C# class or enum."""
    if "enum" in schema or "allOf" in schema or "properties" in schema:
        return True
    return schema.get("type") == "object" and "additionalProperties" not in schema


def is_enum_schema(schema: Mapping[str, Any]) -> bool:
    return "enum" in schema and schema.get("type") != "array"


class TypeMapper:
    """Maps OpenAPI schemas onto C# type names.

    *enum_names* collects the names of enum contracts so that optional
    enum parameters and properties become nullable like other value types.
    """

    def __init__(self) -> None:
        self.enum_names: set[str] = set()

    def map(self, schema: Any, *, nullable: bool = False) -> str:
        name = self._map(schema)
        if nullable and self.is_value_type(name):
            return f"{name}?"
        return name

    def is_value_type(self, name: str) -> bool:
        return name in VALUE_TYPES or name in self.enum_names

    def _map(self, schema: Any) -> str:
        if schema is None:
            return "object"
        if is_reference(schema):
            target = dereference(schema)
            if isinstance(target, Mapping) and is_contract_schema(target):
                name = reference_name(schema)
                if is_enum_schema(target):
                    self.enum_names.add(name)
                return name
            return self._map(target)
        if not isinstance(schema, Mapping):
            return "object"

        schema_type = schema.get("type")
        if isinstance(schema_type, list):
            # OpenAPI 3.1 ``type: [string, "null"]``
            non_null = [entry for entry in schema_type if entry != "null"]
            schema_type = non_null[0] if len(non_null) == 1 else None
        schema_format = schema.get("format")

        if schema_type == "string":
            return {
                "date-time": "DateTimeOffset",
                "date": "DateTimeOffset",
                "uuid": "Guid",
                "byte": "byte[]",
                "binary": "StreamPart",
            }.get(schema_format, "string")
        if schema_type == "integer":
            return "long" if schema_format == "int64" else "int"
        if schema_type == "number":
            return {"float": "float", "decimal": "decimal"}.get(schema_format, "double")
        if schema_type == "boolean":
            return "bool"
        if schema_type == "array":
            return f"ICollection<{self._map(schema.get('items'))}>"
        if schema_type == "file":
            return "StreamPart"

        additional = schema.get("additionalProperties")
        if additional not in (None, False) and "properties" not in schema:
            value_type = "object" if additional is True else self._map(additional)
            return f"IDictionary<string, {value_type}>"

        if "allOf" in schema and len(schema["allOf"]) == 1:
            return self._map(schema["allOf"][0])
        return "object"
