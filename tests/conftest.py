import pytest

from memorydb import MemoryDB

NS = 1_000_000_000


class FakeClock:
    """Manual nanosecond clock for deterministic expiration."""

    def __init__(self, initial: int = 1_700_000_000 * NS):
        self._value = initial

    def now(self) -> int:
        return self._value

    def advance(self, seconds: float) -> None:
        self._value += int(seconds * NS)

    def advance_ns(self, nanos: int) -> None:
        self._value += nanos


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def db(clock):
    store = MemoryDB(time_func=clock.now)
    yield store
    store.close()
