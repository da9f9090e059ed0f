"""
doctable.db.codec

Record <-> JSON document conversion and `ID` field access.

Responsibilities:
- Define the `Codec` protocol tables depend on.
- Provide `JsonCodec`, backed by a pydantic `TypeAdapter` so models, dataclasses
  and typed dicts all work as record types.
- Read and set the `ID` field on any supported record shape.
"""

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Mapping
from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from doctable.db.errors import DeserializationError, MissingIDField, SerializationError

T = TypeVar("T")

ID_FIELD = "ID"


class Codec(Protocol[T]):
    def serialize(self, record: T, *, omit_defaults: bool = False) -> str: ...

    def deserialize(self, raw: str) -> T: ...


class JsonCodec(Generic[T]):
    """
    pydantic-backed codec.

    `omit_defaults=True` drops every field equal to its declared default; patch
    relies on this to leave those fields untouched in the stored document.
    """

    def __init__(self, record_type: type[T]) -> None:
        self.record_type = record_type
        self._adapter: TypeAdapter[T] = TypeAdapter(record_type)

    def serialize(self, record: T, *, omit_defaults: bool = False) -> str:
        try:
            return self._adapter.dump_json(record, exclude_defaults=omit_defaults).decode()
        except (PydanticSerializationError, ValueError, TypeError) as e:
            raise SerializationError(
                f"doctable: failed to serialize {type(record).__qualname__}: {e}"
            ) from e

    def deserialize(self, raw: str) -> T:
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            raise DeserializationError(
                f"doctable: invalid document for {self.record_type!r}: {e}", raw=raw
            ) from e


def get_id(record: Any) -> str:
    """
    Return the record's ID ("" when unset).
    Raises MissingIDField when the record has no string `ID` field.
    """

    if isinstance(record, Mapping):
        if ID_FIELD not in record:
            raise MissingIDField(type(record))
        value = record[ID_FIELD]
    elif isinstance(record, BaseModel):
        if ID_FIELD not in type(record).model_fields:
            raise MissingIDField(type(record))
        value = getattr(record, ID_FIELD)
    else:
        value = getattr(record, ID_FIELD, None)
        if value is None and not hasattr(record, ID_FIELD):
            raise MissingIDField(type(record))

    if value is None:
        return ""
    if not isinstance(value, str):
        raise MissingIDField(type(record))
    return value


def with_id(record: T, id: str) -> T:
    # Shallow copy; the caller's record is never mutated.
    if isinstance(record, BaseModel):
        return record.model_copy(update={ID_FIELD: id})
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        clone = copy.copy(record)
        object.__setattr__(clone, ID_FIELD, id)
        return clone
    if isinstance(record, Mapping):
        return type(record)({**record, ID_FIELD: id})  # type: ignore[call-arg]
    clone = copy.copy(record)
    setattr(clone, ID_FIELD, id)
    return clone


# --- Module Notes -----------------------------------------------------------
# Explicitly resetting a field to its default through patch is indistinguishable
# from leaving it out; use replace when a field must go back to its default.
