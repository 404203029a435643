"""
JSON values decoded from the string-encoded literals in `gopls api-json`.

gopls reports defaults and enum values as JSON source text ("\"Fuzzy\"",
"true", "[\"-node_modules\"]"). They are decoded into one of the value
classes below so the schema builder can switch on a closed set of kinds.
"""
import json
from dataclasses import dataclass


@dataclass(frozen=True)
class StringValue:
    value: str

    def to_json(self):
        return self.value


@dataclass(frozen=True)
class BoolValue:
    value: bool

    def to_json(self):
        return self.value


@dataclass(frozen=True)
class NumberValue:
    value: int | float

    def to_json(self):
        return self.value


@dataclass(frozen=True)
class ArrayValue:
    items: tuple

    def to_json(self):
        return [item.to_json() for item in self.items]


@dataclass(frozen=True)
class ObjectValue:
    entries: tuple  # (key, value) pairs in source order

    def to_json(self):
        return {key: value.to_json() for key, value in self.entries}


@dataclass(frozen=True)
class NullValue:
    def to_json(self):
        return None


Value = StringValue | BoolValue | NumberValue | ArrayValue | ObjectValue | NullValue


def wrap(obj) -> Value:
    """Convert a decoded JSON object into a Value."""
    # bool first: it is a subclass of int
    if isinstance(obj, bool):
        return BoolValue(obj)
    if isinstance(obj, str):
        return StringValue(obj)
    if isinstance(obj, (int, float)):
        return NumberValue(obj)
    if isinstance(obj, list):
        return ArrayValue(tuple(wrap(item) for item in obj))
    if isinstance(obj, dict):
        return ObjectValue(tuple((key, wrap(value)) for key, value in obj.items()))
    if obj is None:
        return NullValue()
    raise TypeError(f"not a JSON value: {obj!r}")


def decode_literal(text: str) -> Value:
    """Decode JSON source text. Raises ValueError if it is not valid JSON."""
    return wrap(json.loads(text))


def unquote(text: str) -> str:
    """
    Decode a quoted string literal as gopls writes them.

    Accepts double-quoted literals (JSON escapes) and back-quoted raw
    literals. Raises ValueError for anything else.
    """
    if len(text) >= 2 and text[0] == text[-1] == "`":
        inner = text[1:-1]
        if "`" in inner:
            raise ValueError(f"invalid raw string literal: {text}")
        return inner
    if len(text) >= 2 and text[0] == text[-1] == '"':
        value = json.loads(text)
        if isinstance(value, str):
            return value
    raise ValueError(f"not a quoted string: {text}")
