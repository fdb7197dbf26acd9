"""Type contracts — data-only parameter trees and the one validator that interprets them.

A contract is a sequence of ``Param`` nodes describing the fields of an object.
Each node is plain data (type name, enum literals, default, nested items/fields),
so the same ``validate()`` handles tool inputs and tool outputs alike.
"""
import copy
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

PRIMITIVE_TYPES = ("string", "number", "integer", "boolean")
CONTRACT_TYPES = PRIMITIVE_TYPES + ("enum", "array", "object")


class ValidationError(Exception):
    """A value did not satisfy its contract. Only the first failure is reported."""

    def __init__(self, field: str, expected: str, got: str):
        self.field = field
        self.expected = expected
        self.got = got
        super().__init__(f"{field or '<root>'}: expected {expected}, got {got}")


@dataclass(frozen=True)
class Param:
    name: str
    type: str = "string"
    description: str = ""
    required: bool = True
    default: Any = None
    values: Tuple[Any, ...] = ()  # enum literals
    items: Optional["Param"] = None  # array element contract
    fields: Tuple["Param", ...] = ()  # object sub-fields

    def __post_init__(self):
        if self.type not in CONTRACT_TYPES:
            raise ValueError(f"Unknown contract type {self.type!r} for {self.name!r}")
        if self.type == "enum" and not self.values:
            raise ValueError(f"Enum {self.name!r} declares no values")
        if self.type == "array" and self.items is None:
            raise ValueError(f"Array {self.name!r} declares no item contract")


def validate(params: Sequence[Param], value: Any) -> Dict[str, Any]:
    """Validate an object against its field contract.

    Returns a new dict holding only declared fields, with defaults substituted
    for absent optional fields. Raises ValidationError on the first mismatch.
    ``None`` is accepted as an empty object (callers may send no arguments).
    """
    if value is None:
        value = {}
    if not isinstance(value, Mapping):
        raise ValidationError("", "object", _json_type(value))
    return _validate_fields(params, value, "")


def _validate_fields(params: Sequence[Param], value: Mapping, path: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for param in params:
        field = f"{path}.{param.name}" if path else param.name
        raw = value.get(param.name)
        if raw is None:
            if param.required:
                got = "missing" if param.name not in value else "null"
                raise ValidationError(field, _describe(param), got)
            if param.default is not None:
                out[param.name] = copy.deepcopy(param.default)
            continue
        out[param.name] = _validate_value(param, raw, field)
    return out


def _validate_value(param: Param, raw: Any, field: str) -> Any:
    kind = param.type
    if kind == "string":
        if isinstance(raw, str):
            return raw
    elif kind == "number":
        if _is_number(raw):
            return raw
    elif kind == "integer":
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        if _is_number(raw) and raw.is_integer():
            return int(raw)
    elif kind == "boolean":
        if isinstance(raw, bool):
            return raw
    elif kind == "enum":
        if _is_listed(raw, param.values):
            return raw
        # Unlisted value on an optional enum falls back to its default
        if not param.required and param.default is not None:
            return copy.deepcopy(param.default)
    elif kind == "array":
        if isinstance(raw, (list, tuple)):
            return [
                _validate_value(param.items, item, f"{field}[{i}]")
                for i, item in enumerate(raw)
            ]
    elif kind == "object":
        if isinstance(raw, Mapping):
            return _validate_fields(param.fields, raw, field)
    raise ValidationError(field, _describe(param), _json_type(raw))


def _is_number(raw: Any) -> bool:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return False
    return not (isinstance(raw, float) and math.isnan(raw))


def _is_listed(raw: Any, values: Tuple[Any, ...]) -> bool:
    # type check keeps True from matching 1
    return any(raw == v and type(raw) is type(v) for v in values)


def _describe(param: Param) -> str:
    if param.type == "enum":
        return "one of " + ", ".join(repr(v) for v in param.values)
    if param.type == "array":
        return f"array of {_describe(param.items)}"
    return param.type


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


# ── JSON Schema rendering (for tool listings) ─────────────────

def to_json_schema(params: Sequence[Param]) -> Dict[str, Any]:
    """Render an object contract as a JSON Schema document."""
    return {
        "type": "object",
        "properties": {p.name: _param_schema(p) for p in params},
        "required": [p.name for p in params if p.required],
    }


def _param_schema(param: Param) -> Dict[str, Any]:
    if param.type == "enum":
        schema: Dict[str, Any] = {"enum": list(param.values)}
        if all(isinstance(v, str) for v in param.values):
            schema["type"] = "string"
    elif param.type == "array":
        schema = {"type": "array", "items": _param_schema(param.items)}
    elif param.type == "object":
        schema = to_json_schema(param.fields)
    else:
        schema = {"type": param.type}
    if param.description:
        schema["description"] = param.description
    if param.default is not None:
        schema["default"] = param.default
    return schema


def text_output_contract(description: str = "") -> List[Param]:
    """Output contract shared by all text-producing tools: {content: [{type: "text", text}]}."""
    return [
        Param(
            "content",
            type="array",
            description=description,
            items=Param(
                "item",
                type="object",
                fields=(
                    Param("type", type="enum", values=("text",)),
                    Param("text", description=description),
                ),
            ),
        ),
    ]
