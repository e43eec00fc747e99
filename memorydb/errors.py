from __future__ import annotations


class MemoryDBError(Exception):
    """Base class for every error raised by the store."""

    code = "MEMDB-500"
    default_message = "memory db error"

    def __init__(self, message: str | None = None, *, key: str | None = None):
        self.key = key
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.key is None:
            return self.message
        return f"{self.message}: {self.key!r}"


class KeyNotFoundError(MemoryDBError, KeyError):
    code = "MEMDB-404"
    default_message = "key not found"


class KeyExpiredError(MemoryDBError, KeyError):
    code = "MEMDB-410"
    default_message = "key expired"


class StoreClosedError(MemoryDBError, RuntimeError):
    code = "MEMDB-503"
    default_message = "memory db is closed"


class TypeMismatchError(MemoryDBError, TypeError):
    code = "MEMDB-422"
    default_message = "type assertion failed"

    def __init__(self, key: str, expected: object, actual: type):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"type assertion failed (expected {_type_name(expected)}, got {actual.__name__})",
            key=key,
        )


def _type_name(expected: object) -> str:
    if isinstance(expected, tuple):
        return " | ".join(_type_name(t) for t in expected)
    return getattr(expected, "__name__", repr(expected))
