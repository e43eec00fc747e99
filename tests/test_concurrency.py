import random
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from memorydb import KeyNotFoundError, MemoryDB


def test_random_ops_on_disjoint_keys_keep_map_consistent():
    db = MemoryDB(sweep_interval_seconds=0.01)
    workers = 16
    start = threading.Barrier(workers)

    def worker(worker_id: int) -> dict:
        rng = random.Random(worker_id)
        expected = {}
        start.wait()
        for _ in range(2000):
            key = f"w{worker_id}-{rng.randrange(50)}"
            op = rng.random()
            if op < 0.5:
                value = rng.randrange(1_000_000)
                db.set(key, value)
                expected[key] = value
            elif op < 0.8:
                try:
                    assert db.get(key) == expected[key]
                except KeyNotFoundError:
                    assert key not in expected
            else:
                db.delete(key)
                expected.pop(key, None)
        return expected

    try:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(worker, range(workers)))

        merged = {}
        for expected in results:
            merged.update(expected)

        assert len(db) == len(merged)
        for key, value in merged.items():
            assert db.get(key) == value
    finally:
        db.close()


def test_concurrent_get_set_is_thread_safe():
    db = MemoryDB()
    start = threading.Barrier(9)

    def writer(prefix: str):
        start.wait()
        for i in range(500):
            db.set(f"{prefix}-{i}", i, 30)

    def reader(prefix: str):
        start.wait()
        for i in range(500):
            try:
                value = db.get(f"{prefix}-{i}")
            except KeyNotFoundError:
                continue
            assert isinstance(value, int)

    threads = [threading.Thread(target=writer, args=(p,)) for p in "abcd"]
    threads += [threading.Thread(target=reader, args=(p,)) for p in "abcd"]

    for thread in threads:
        thread.start()

    start.wait()

    for thread in threads:
        thread.join()

    try:
        assert db.get("a-499") == 499
        assert db.get("d-499") == 499
        assert len(db) == 2000
    finally:
        db.close()


def test_concurrent_close_calls_do_not_fail():
    db = MemoryDB()
    db.set("k", "v")
    errors = []

    def close():
        try:
            db.close()
        except Exception as exc:  # pragma: no cover - reported below
            errors.append(exc)

    threads = [threading.Thread(target=close) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert db.closed is True
    assert not db._sweeper.is_alive()
    assert len(db) == 0


@pytest.mark.parametrize("ttl", [0, 30])
def test_expiring_readers_do_not_lose_concurrent_writes(clock, ttl):
    db = MemoryDB(time_func=clock.now)
    try:
        for i in range(200):
            db.set(f"k{i}", "stale", 1)
        clock.advance(2)

        def rewrite():
            for i in range(200):
                db.set(f"k{i}", "fresh", ttl)

        def read():
            for i in range(200):
                try:
                    db.get(f"k{i}")
                except KeyError:
                    pass

        with ThreadPoolExecutor(max_workers=4) as executor:
            futures = [executor.submit(rewrite), executor.submit(read), executor.submit(read)]
            for future in futures:
                future.result()

        for i in range(200):
            assert db.get(f"k{i}") == "fresh"
    finally:
        db.close()
