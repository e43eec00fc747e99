"""Typed helpers over the type-erased MemoryDB API."""

from __future__ import annotations

from typing import Tuple, Type, TypeVar, Union

from memorydb.errors import TypeMismatchError
from memorydb.store import MemoryDB

T = TypeVar("T")


def set_as(db: MemoryDB, key: str, value: T, ttl: float = 0) -> None:
    db.set(key, value, ttl)


def get_as(db: MemoryDB, key: str, expected_type: Union[Type[T], Tuple[Type[T], ...]]) -> T:
    """Like ``db.get`` but raises TypeMismatchError unless the stored value is
    an instance of ``expected_type``."""
    value = db.get(key)
    if not isinstance(value, expected_type):
        raise TypeMismatchError(key, expected_type, type(value))
    return value
