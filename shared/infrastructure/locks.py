"""
Keyed in-process locks.

Serializes critical sections per key (a property id) inside one process.
Cross-process serialization is the database's job (row locks); this
registry covers backends that ignore ``SELECT ... FOR UPDATE`` and
keeps threads of the same worker from racing each other.
"""

from contextlib import contextmanager
from typing import Hashable, Iterator
import threading
import weakref


class KeyedLockRegistry:
    """
    One ``threading.Lock`` per key, created on first use

    Locks are held weakly: an entry lives only while some thread holds or
    waits on it, so the registry does not grow with every key ever seen.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[Hashable, threading.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._lock_for(key)
        with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


property_locks = KeyedLockRegistry()
