from memorydb.config import StoreSettings
from memorydb.errors import (
    KeyExpiredError,
    KeyNotFoundError,
    MemoryDBError,
    StoreClosedError,
    TypeMismatchError,
)
from memorydb.log import configure_logging
from memorydb.store import MemoryDB
from memorydb.typed import get_as, set_as

__all__ = [
    "KeyExpiredError",
    "KeyNotFoundError",
    "MemoryDB",
    "MemoryDBError",
    "StoreClosedError",
    "StoreSettings",
    "TypeMismatchError",
    "configure_logging",
    "get_as",
    "set_as",
]

__version__ = "1.0.0"
