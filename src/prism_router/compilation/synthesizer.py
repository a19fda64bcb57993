"""Structural schema to TypeScript type synthesis.

Schemas are the JSON Schema subset produced by route modules.  Request
components are rendered directly as inline member lists and spliced into
the options parameter type; no intermediate named declaration is ever
built.  Response components become one discriminated-union member per
declared status.

Results are cached per compile, keyed by the canonical JSON text of the
schema, so identical schemas declared by different routes are rendered
once.
"""

import json
import re
from typing import Any

from prism_router.errors import SynthesisError
from prism_router.routing.route import ApiRoute, ResponseSchema

# Placeholder slot types for a status that declares no body / headers
ANY_OBJECT = "Record<string, any>"
STRING_MAP = "Record<string, string>"
UNTYPED_RESPONSE = "{ status: number; body: any; headers: Record<string, string> }"

JSON_CONTENT_TYPES = frozenset(
    {
        "application/json",
        "application/vnd.api+json",
        "application/ld+json",
        "text/json",
    }
)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_PRIMITIVES = {
    "string": "string",
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
    "null": "null",
}


def is_json_content_type(content_type: str | None) -> bool:
    """True when *content_type* is absent or one of the JSON media types."""
    if content_type is None:
        return True
    return content_type.split(";", 1)[0].strip().lower() in JSON_CONTENT_TYPES


def property_key(name: str) -> str:
    """Render *name* as an object key, quoting it unless it is an identifier."""
    if _IDENTIFIER_RE.match(name):
        return name
    return json.dumps(name)


class TypeSynthesizer:
    """Renders structural schemas as TypeScript type text.

    One instance belongs to one compile session.
    """

    __slots__ = ("_cache",)

    def __init__(self) -> None:
        self._cache: dict[str, str] = {}

    def type_of(self, schema: dict[str, Any]) -> str:
        """Return the TypeScript type expression for *schema*."""
        key = _canonical(schema)
        cached = self._cache.get(key)
        if cached is None:
            cached = self._render(schema)
            self._cache[key] = cached
        return cached

    def members(self, schema: dict[str, Any]) -> str:
        """Return the inline member list of an object *schema*.

        ``{"type": "object", "properties": {"a": ...}}`` becomes
        ``"a?: string"``.  Raises ``SynthesisError`` for non-object schemas.
        """
        if not _is_object(schema):
            msg = f"Expected an object schema, got {_canonical(schema)}"
            raise SynthesisError(msg, schema=schema)
        return "; ".join(self._member_list(schema))

    # -- request / response ------------------------------------------------

    def request_fragments(self, route: ApiRoute) -> dict[str, str]:
        """Return the ``query`` / ``body`` / ``headers`` types a route declares.

        Components the route does not declare are absent from the result.
        Query and headers are always object shapes and are rendered from
        their member lists; a body may be any shape.
        """
        fragments: dict[str, str] = {}
        request = route.request
        if request is None:
            return fragments
        if request.query is not None:
            fragments["query"] = self._inline_object(request.query)
        if request.body is not None:
            fragments["body"] = self.type_of(request.body)
        if request.headers is not None:
            fragments["headers"] = self._inline_object(request.headers)
        return fragments

    def response_union(self, route: ApiRoute) -> str:
        """Return the union of ``{status; body; headers}`` envelopes for a route."""
        if not route.response:
            return UNTYPED_RESPONSE
        members = [
            self._response_member(status, spec) for status, spec in route.response.items()
        ]
        return " | ".join(members)

    def _response_member(self, status: int, spec: ResponseSchema) -> str:
        if not is_json_content_type(spec.content_type):
            body = "Response"
        elif spec.body is not None:
            body = self.type_of(spec.body)
        else:
            body = ANY_OBJECT
        headers = self._inline_object(spec.headers) if spec.headers is not None else STRING_MAP
        return f"{{ status: {status}; body: {body}; headers: {headers} }}"

    def _inline_object(self, schema: dict[str, Any]) -> str:
        if not _is_object(schema):
            return self.type_of(schema)
        members = self.members(schema)
        return f"{{ {members} }}" if members else "{}"

    # -- rendering -----------------------------------------------------------

    def _render(self, schema: Any) -> str:
        if schema is True or schema == {}:
            return "unknown"
        if not isinstance(schema, dict):
            msg = f"Schema must be a mapping, got {type(schema).__name__}"
            raise SynthesisError(msg, schema=schema)

        if "$ref" in schema:
            msg = f"Unsupported $ref {schema['$ref']!r}; inline the referenced schema"
            raise SynthesisError(msg, schema=schema)

        if "const" in schema:
            return _literal(schema["const"])
        if "enum" in schema:
            return _union([_literal(value) for value in schema["enum"]])
        for keyword in ("anyOf", "oneOf"):
            if keyword in schema:
                return _union([self._render(option) for option in schema[keyword]])
        if "allOf" in schema:
            parts = [self._render(part) for part in schema["allOf"]]
            return " & ".join(_wrap(part) for part in parts)

        kind = schema.get("type")
        if isinstance(kind, list):
            return _union([self._render({**schema, "type": k}) for k in kind])
        if kind in _PRIMITIVES:
            return _PRIMITIVES[kind]
        if kind == "array":
            return self._render_array(schema)
        if kind == "object" or _is_object(schema):
            members = self._member_list(schema)
            if not members:
                return ANY_OBJECT
            return "{ " + "; ".join(members) + " }"
        if kind is None:
            return "unknown"

        msg = f"Unsupported schema type {kind!r}"
        raise SynthesisError(msg, schema=schema)

    def _render_array(self, schema: dict[str, Any]) -> str:
        items = schema.get("items")
        if items is None:
            return "unknown[]"
        if isinstance(items, list):
            return "[" + ", ".join(self._render(item) for item in items) + "]"
        return f"{_wrap(self._render(items))}[]"

    def _member_list(self, schema: dict[str, Any]) -> list[str]:
        properties = schema.get("properties") or {}
        required = set(schema.get("required") or ())
        members = [
            f"{property_key(name)}{'' if name in required else '?'}: {self._render(prop)}"
            for name, prop in properties.items()
        ]
        extra = schema.get("additionalProperties")
        if isinstance(extra, dict):
            members.append(f"[key: string]: {self._render(extra)}")
        elif extra is True:
            members.append("[key: string]: unknown")
        return members


def _is_object(schema: Any) -> bool:
    return isinstance(schema, dict) and (
        schema.get("type") == "object" or "properties" in schema
    )


def _literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return json.dumps(value)
    msg = f"Unsupported literal value {value!r}"
    raise SynthesisError(msg, schema=value)


def _union(options: list[str]) -> str:
    if not options:
        return "never"
    unique = list(dict.fromkeys(options))
    return " | ".join(unique)


def _wrap(type_text: str) -> str:
    """Parenthesize a union or intersection used as an operand."""
    depth = 0
    for i, char in enumerate(type_text):
        if char in "{[(<":
            depth += 1
        elif char in "}])>":
            depth -= 1
        elif depth == 0 and char in "|&" and type_text[i - 1 : i + 2] in (" | ", " & "):
            return f"({type_text})"
    return type_text


def _canonical(schema: Any) -> str:
    try:
        return json.dumps(schema, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        msg = f"Schema is not plain data: {exc}"
        raise SynthesisError(msg, schema=schema) from exc
