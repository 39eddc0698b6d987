"""Exclusive locks keyed by aggregate id, for stores living in one process.

Admission reads a roster count and then writes, so every operation on one
event runs under that event's lock. Participant records are read-modify-write
too and are shared across events; their locks are taken after the event lock,
always in sorted order, so two operations can never wait on each other.

These locks only serialize callers sharing the store instance. Stores shared
between processes serialize in the database instead.
"""

import threading
import weakref
from collections.abc import Hashable, Iterator
from contextlib import ExitStack, contextmanager


class _KeyLock:
    __slots__ = ("_lock", "__weakref__")

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def acquire(self) -> None:
        self._lock.acquire()

    def release(self) -> None:
        self._lock.release()


class KeyedLocks:
    """Registry handing out one lock per key.

    Entries disappear once no caller holds or waits on them.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()

    def _lock_for(self, key: Hashable) -> _KeyLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = _KeyLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, *keys: Hashable) -> Iterator[None]:
        """Hold the locks for all keys, acquired in a stable order."""
        ordered = sorted(set(keys), key=str)
        locks = [self._lock_for(key) for key in ordered]
        with ExitStack() as stack:
            for lock in locks:
                lock.acquire()
                stack.callback(lock.release)
            yield
