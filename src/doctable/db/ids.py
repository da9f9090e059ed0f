"""
doctable.db.ids

Document identifier generation.

Responsibilities:
- Produce time-sortable, unique, fixed-length identifiers (ULIDs).
"""

from __future__ import annotations

import ulid

ID_LENGTH = 26


def new_id() -> str:
    # 48-bit millisecond timestamp + 80 random bits, Crockford base32.
    return str(ulid.new())
