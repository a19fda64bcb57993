"""Python annotation to JSON Schema conversion.

Route modules may declare schema components either as JSON Schema dicts
or as Python annotations.  Annotations are converted here, once, when the
route is normalized, so everything downstream only sees plain dicts.

Supports: ``str``, ``int``, ``float``, ``bool``, ``None``, ``list[X]``,
``tuple[X, ...]``, ``dict[str, X]``, ``X | None``, ``X | Y``,
``Literal[...]``, dataclasses, and ``TypedDict`` classes.
"""

import dataclasses
import types
from collections.abc import Mapping
from typing import Any, Literal, Union, get_args, get_origin, get_type_hints, is_typeddict

from prism_router.errors import SynthesisError

# Python type → JSON Schema type
_TYPE_MAP: dict[Any, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    type(None): "null",
    None: "null",
}


def to_schema(value: Any) -> dict[str, Any] | None:
    """Return *value* as a JSON Schema dict, or None when absent."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        return dict(value)
    return annotation_to_schema(value)


def annotation_to_schema(annotation: Any) -> dict[str, Any]:
    """Convert a Python type annotation to a JSON Schema fragment.

    Raises ``SynthesisError`` for annotations with no structural equivalent.
    """
    if annotation is Any:
        return {}

    if annotation in _TYPE_MAP:
        return {"type": _TYPE_MAP[annotation]}

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Literal:
        if len(args) == 1:
            return {"const": args[0]}
        return {"enum": list(args)}

    if origin is Union or origin is types.UnionType:
        return {"anyOf": [annotation_to_schema(arg) for arg in args]}

    if origin is list or annotation is list:
        if args:
            return {"type": "array", "items": annotation_to_schema(args[0])}
        return {"type": "array"}

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return {"type": "array", "items": annotation_to_schema(args[0])}
        return {"type": "array", "items": [annotation_to_schema(arg) for arg in args]}

    if origin is dict or annotation is dict:
        if len(args) == 2:
            return {"type": "object", "additionalProperties": annotation_to_schema(args[1])}
        return {"type": "object"}

    if isinstance(annotation, type) and is_typeddict(annotation):
        hints = get_type_hints(annotation)
        required = [name for name in hints if name in annotation.__required_keys__]
        return _object_schema(hints, required)

    if isinstance(annotation, type) and dataclasses.is_dataclass(annotation):
        hints = get_type_hints(annotation)
        required = [
            f.name
            for f in dataclasses.fields(annotation)
            if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING
        ]
        return _object_schema({f.name: hints[f.name] for f in dataclasses.fields(annotation)}, required)

    msg = f"Cannot convert annotation {annotation!r} to a structural schema"
    raise SynthesisError(msg, schema=annotation)


def _object_schema(hints: dict[str, Any], required: list[str]) -> dict[str, Any]:
    result: dict[str, Any] = {
        "type": "object",
        "properties": {name: annotation_to_schema(hint) for name, hint in hints.items()},
    }
    if required:
        result["required"] = required
    return result
