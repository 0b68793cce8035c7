"""
Tests for the process-wide keyed locks.
"""
import threading
from concurrent.futures import ThreadPoolExecutor

from src.core.locks import KeyedLock


class TestKeyedLock:
    """Tests for KeyedLock."""

    def test_entry_dropped_after_release(self):
        locks = KeyedLock()

        with locks.hold(1):
            assert len(locks) == 1
        assert len(locks) == 0

    def test_reentrant(self):
        locks = KeyedLock()

        with locks.hold("a"):
            with locks.hold("a"):
                assert len(locks) == 1
            assert len(locks) == 1
        assert len(locks) == 0

    def test_registry_does_not_grow_with_keys_used(self):
        locks = KeyedLock()

        def use(key):
            with locks.hold(key):
                pass

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(use, range(1000)))

        assert len(locks) == 0

    def test_entry_kept_while_another_thread_waits(self):
        locks = KeyedLock()
        waiting = threading.Event()
        acquired = threading.Event()

        def second():
            waiting.set()
            with locks.hold("order"):
                acquired.set()

        with locks.hold("order"):
            t = threading.Thread(target=second)
            t.start()
            waiting.wait(timeout=5)
            assert not acquired.wait(timeout=0.2)

        t.join(timeout=5)
        assert acquired.is_set()
        assert len(locks) == 0

    def test_exception_releases_entry(self):
        locks = KeyedLock()

        try:
            with locks.hold(7):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert len(locks) == 0
        with locks.hold(7):
            pass

    def test_registry_lock_is_per_instance(self):
        assert KeyedLock()._registry_lock is not KeyedLock()._registry_lock
