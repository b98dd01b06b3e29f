"""Tagged values crossing the interpreter boundary.

Every result coming out of :class:`~codex.script.engine.ScriptEngine` is a
:class:`ScriptValue`. Failures are values too (``ValueKind.ERROR``), so call
sites decide how to contain them instead of unwinding through ``except``.

Coercion rules:

* ``as_bool`` follows Lua truthiness: only nil and ``false`` are false. An
  error is false as well, so guards fail closed.
* ``as_text`` renders nil and errors as ``""``, booleans as ``true``/``false``,
  integral numbers without a fractional part, other floats with 14
  significant digits (what Lua's ``tostring`` prints), sequences as their
  items joined with ``", "`` and mappings as ``key=value`` pairs.
* ``to_python`` returns the plain Python value (str, int/float, bool, None,
  list, dict) and ``unwrap`` does the same but raises on an error marker.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .errors import ScriptEvaluationError


class ValueKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    NIL = "nil"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ScriptValue:
    """A value read from the interpreter, tagged with its kind."""

    kind: ValueKind
    data: object = None

    @classmethod
    def nil(cls) -> "ScriptValue":
        return cls(ValueKind.NIL)

    @classmethod
    def error(cls, message: str) -> "ScriptValue":
        return cls(ValueKind.ERROR, message)

    @classmethod
    def of(cls, value: object) -> "ScriptValue":
        """Tag a plain Python value. Tables must already be lists or dicts."""
        if isinstance(value, ScriptValue):
            return value
        if value is None:
            return cls.nil()
        if isinstance(value, bool):
            return cls(ValueKind.BOOL, value)
        if isinstance(value, (int, float)):
            return cls(ValueKind.NUMBER, value)
        if isinstance(value, str):
            return cls(ValueKind.STRING, value)
        if isinstance(value, (list, tuple)):
            return cls(ValueKind.SEQUENCE, list(value))
        if isinstance(value, dict):
            return cls(ValueKind.MAPPING, dict(value))
        raise TypeError(f"Cannot tag value of type {type(value).__name__}.")

    @property
    def is_nil(self) -> bool:
        return self.kind is ValueKind.NIL

    @property
    def is_error(self) -> bool:
        return self.kind is ValueKind.ERROR

    @property
    def message(self) -> str:
        """Error text for an error marker, empty otherwise."""
        return str(self.data) if self.is_error else ""

    def as_bool(self) -> bool:
        if self.kind in (ValueKind.NIL, ValueKind.ERROR):
            return False
        if self.kind is ValueKind.BOOL:
            return bool(self.data)
        return True

    def as_text(self) -> str:
        if self.kind in (ValueKind.NIL, ValueKind.ERROR):
            return ""
        return _text_of(self.data)

    def to_python(self) -> object:
        if self.is_error:
            return None
        return self.data

    def unwrap(self) -> object:
        if self.is_error:
            raise ScriptEvaluationError(self.message)
        return self.data


def format_number(value: int | float) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return format(value, ".14g")


def _text_of(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, list):
        return ", ".join(_text_of(item) for item in value)
    if isinstance(value, dict):
        return ", ".join(f"{_text_of(key)}={_text_of(item)}" for key, item in value.items())
    return str(value)
