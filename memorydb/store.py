"""In-memory key-value store with per-key TTL.

The store is process-local. It is safe for concurrent access from threads
inside the same Python process, but it is not shared across workers/instances
and nothing survives a restart.

Expired entries are reclaimed two ways: lazily, when ``get`` finds one, and
actively, by a daemon thread that sweeps the whole map every
``sweep_interval_seconds``.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from memorydb.config import StoreSettings
from memorydb.errors import KeyExpiredError, KeyNotFoundError, StoreClosedError
from memorydb.log import logger
from memorydb.rwlock import RWLock

NANOS_PER_SECOND = 1_000_000_000
NO_EXPIRATION = 0


@dataclass(slots=True)
class _Entry:
    value: Any
    expires_at: int

    def expired(self, now: int) -> bool:
        return self.expires_at != NO_EXPIRATION and now > self.expires_at


class MemoryDB:
    def __init__(
        self,
        settings: Optional[StoreSettings] = None,
        *,
        sweep_interval_seconds: Optional[float] = None,
        time_func: Callable[[], int] = time.time_ns,
    ):
        settings = settings or StoreSettings()
        if sweep_interval_seconds is not None:
            settings = StoreSettings(sweep_interval_seconds=sweep_interval_seconds)

        self._data: Dict[str, _Entry] = {}
        self._lock = RWLock()
        self._closed = False
        self._time_func = time_func
        self._sweep_interval_seconds = settings.sweep_interval_seconds
        self._stop = threading.Event()
        self._sweeper = threading.Thread(
            target=self._run_sweeper,
            name=f"memorydb-sweeper-{id(self):x}",
            daemon=True,
        )
        self._sweeper.start()
        logger.debug(
            "sweeper_started",
            extra={"interval_s": self._sweep_interval_seconds, "sweeper_thread": self._sweeper.name},
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "MemoryDB":
        return cls(StoreSettings.from_env(), **kwargs)

    @property
    def closed(self) -> bool:
        with self._lock.read():
            return self._closed

    @property
    def sweep_interval_seconds(self) -> float:
        return self._sweep_interval_seconds

    def _expiration(self, ttl: float) -> int:
        if isinstance(ttl, float) and math.isnan(ttl):
            raise ValueError("ttl must be a number of seconds, not NaN")
        if ttl <= 0:
            return NO_EXPIRATION
        nanos = ttl * NANOS_PER_SECOND
        # inf, or a float ttl too large to represent in nanoseconds
        if isinstance(nanos, float) and math.isinf(nanos):
            return NO_EXPIRATION
        return self._time_func() + int(nanos)

    def _ensure_open(self) -> None:
        # caller holds the lock
        if self._closed:
            raise StoreClosedError()

    def set(self, key: str, value: Any, ttl: float = 0) -> None:
        """Store ``value`` under ``key``, replacing any previous entry.

        ``ttl <= 0`` or ``math.inf`` keeps the entry until it is deleted;
        otherwise it expires ``ttl`` seconds from now. A NaN ttl raises
        ValueError and leaves the store unchanged.
        """
        with self._lock.write():
            self._ensure_open()
            self._data[key] = _Entry(value, self._expiration(ttl))

    def get(self, key: str) -> Any:
        """Return the value stored under ``key``.

        Raises KeyNotFoundError if the key is absent and KeyExpiredError if its
        TTL has elapsed; in the latter case the entry is removed first.
        """
        with self._lock.read():
            self._ensure_open()
            entry = self._data.get(key)
            if entry is None:
                raise KeyNotFoundError(key=key)
            if not entry.expired(self._time_func()):
                return entry.value

        self._evict(key, entry)
        raise KeyExpiredError(key=key)

    def _evict(self, key: str, entry: _Entry) -> None:
        # the read lock was released before this point; only drop the entry we
        # saw expire, not one a concurrent set put in its place
        with self._lock.write():
            if self._data.get(key) is entry:
                del self._data[key]

    def delete(self, key: str) -> None:
        with self._lock.write():
            self._ensure_open()
            self._data.pop(key, None)

    def expire(self, key: str, ttl: float) -> None:
        """Reset the expiration of an existing key without touching its value.

        The new deadline replaces the old one. ``ttl <= 0`` makes the entry
        permanent.
        """
        with self._lock.write():
            self._ensure_open()
            entry = self._data.get(key)
            if entry is None:
                raise KeyNotFoundError(key=key)
            if entry.expired(self._time_func()):
                del self._data[key]
                raise KeyNotFoundError(key=key)
            entry.expires_at = self._expiration(ttl)

    def _cleanup_expired(self, now: int) -> int:
        expired_keys = [key for key, entry in self._data.items() if entry.expired(now)]
        for key in expired_keys:
            del self._data[key]
        return len(expired_keys)

    def sweep(self) -> int:
        """Force a full cleanup pass and return the number of removed keys."""
        with self._lock.write():
            self._ensure_open()
            return self._cleanup_expired(self._time_func())

    def _run_sweeper(self) -> None:
        while not self._stop.wait(self._sweep_interval_seconds):
            with self._lock.write():
                if self._closed:
                    break
                removed = self._cleanup_expired(self._time_func())
                remaining = len(self._data)
            if removed:
                logger.debug("sweep", extra={"removed": removed, "key_count": remaining})

    def close(self) -> None:
        """Stop the sweeper and drop every entry.

        Safe to call more than once; only the first call does any work. Every
        other operation raises StoreClosedError afterwards.
        """
        with self._lock.write():
            if self._closed:
                return
            self._closed = True
            self._stop.set()

        self._sweeper.join()

        with self._lock.write():
            dropped = len(self._data)
            self._data.clear()
        logger.info("store_closed", extra={"key_count": dropped})

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._data)

    def __enter__(self) -> "MemoryDB":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
