"""
doctable.db.fragments

Raw SQL fragments and their composition into statements.

Responsibilities:
- Define `SQL`, a (clause text, positional args) pair callers build queries from.
- Compose fragments left-to-right into a bound `Statement`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from doctable.db.binding import Statement, bind

# Quoted literals and identifiers may legally contain '?', so strip them before counting.
_QUOTED = re.compile(r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"")


@dataclass(frozen=True, slots=True)
class SQL:
    """
    Part of a larger query, e.g. `SQL("where data->>'Age' > ?", (40,))`.
    """

    query: str
    args: Sequence[Any] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


def by_id(id: str) -> SQL:
    return SQL("where data->>'ID' = ?", (id,))


def count_placeholders(text: str) -> int:
    return _QUOTED.sub("", text).count("?")


def compose(head: str, fragments: Iterable[SQL], tail: str = "") -> Statement:
    """
    Build `head <fragment> <fragment> ... <tail>` and bind every fragment's args
    in order, starting at position 1.
    """

    parts = [head]
    args: list[Any] = []
    for fragment in fragments:
        parts.append(fragment.query)
        args.extend(fragment.args)
    if tail:
        parts.append(tail)

    stmt = Statement(" ".join(parts))
    assert count_placeholders(stmt.text) == len(args), (
        f"{len(args)} argument(s) for {count_placeholders(stmt.text)} placeholder(s) in {stmt.text!r}"
    )
    for position, value in enumerate(args, start=1):
        bind(stmt, position, value)
    return stmt


# --- Module Notes -----------------------------------------------------------
# Fragments are plain text on purpose: anything SQLite accepts after the table name
# (where/order by/limit/offset) is a valid fragment.
