from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class GroupLocks:
    """One mutex per group id, created on first use.

    Draws in the same group run one at a time; draws in different groups
    never wait on each other. Process-local: run a single worker process
    (threads are fine) or put the database's row locking in front.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def lock_for(self, group_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(group_id)
            if lock is None:
                lock = self._locks[group_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, group_id: int) -> Iterator[None]:
        lock = self.lock_for(group_id)
        with lock:
            yield
