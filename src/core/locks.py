"""
Process-wide keyed locks.

Stock counters and order statuses are read-modify-write. Sync endpoints run
in FastAPI's threadpool, so two requests for the same menu item could
interleave between the read and the write. Rows are also locked with
SELECT ... FOR UPDATE, which SQLite ignores; these locks cover that case.

Lock order is order, then menu items in ascending id, then the database.
"""
import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator, List


class KeyedLock:
    """
    One re-entrant lock per key.

    Entries are reference counted and dropped once no thread holds or waits
    for them, so the registry only grows with the number of keys in use.
    """

    def __init__(self):
        self._registry_lock = threading.Lock()
        self._locks: Dict[Hashable, List] = {}

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)

    def _acquire_entry(self, key: Hashable) -> threading.RLock:
        with self._registry_lock:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.RLock(), 0]
            entry[1] += 1
            return entry[0]

    def _release_entry(self, key: Hashable) -> None:
        with self._registry_lock:
            entry = self._locks[key]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._acquire_entry(key)
        try:
            with lock:
                yield
        finally:
            self._release_entry(key)


item_locks = KeyedLock()
order_locks = KeyedLock()
# Re-entrant: OrderService holds it across a whole create while
# SequenceService takes it per counter bump.
sequence_lock = threading.RLock()
