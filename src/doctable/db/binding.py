"""
doctable.db.binding

Positional parameter binding for raw SQLite statements.

Responsibilities:
- Hold statement text plus its bound parameters (`Statement`).
- Map a closed set of Python value kinds onto SQLite parameter values (`bind`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from doctable.db.errors import UnsupportedBindType

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass(slots=True)
class Statement:
    """
    A prepared-statement stand-in: SQL text with `?` placeholders and the values
    bound to them, keyed by 1-based position.
    """

    text: str
    bound: dict[int, Any] = field(default_factory=dict)

    def parameters(self) -> tuple[Any, ...]:
        # Positions must be contiguous from 1; a gap means a placeholder was never bound.
        count = len(self.bound)
        missing = [i for i in range(1, count + 1) if i not in self.bound]
        if missing:
            raise ValueError(f"statement has unbound positions {missing}: {self.text!r}")
        return tuple(self.bound[i] for i in range(1, count + 1))


def bind(stmt: Statement, position: int, value: Any) -> None:
    """
    Bind `value` at 1-based `position`.

    Public so callers querying the database directly can reuse the same rules.
    Raises UnsupportedBindType for any kind outside int/bool/bytes/float/None/str.
    """

    if position < 1:
        raise ValueError(f"bind positions start at 1, got {position}")

    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        stmt.bound[position] = int(value)
    elif isinstance(value, int):
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise UnsupportedBindType(value, reason="outside signed 64-bit range")
        stmt.bound[position] = int(value)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        stmt.bound[position] = bytes(value)
    elif isinstance(value, float):
        stmt.bound[position] = float(value)
    elif value is None:
        stmt.bound[position] = None
    elif isinstance(value, str):
        # str.__str__ keeps the raw value for (str, Enum) mixins, whose __str__ is "Cls.member".
        stmt.bound[position] = str.__str__(value)
    else:
        raise UnsupportedBindType(value)


# --- Module Notes -----------------------------------------------------------
# Enum members deriving from int/str bind as their underlying value.
