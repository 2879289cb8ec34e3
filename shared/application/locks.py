"""
Keyed Locks

Mutual-exclusion scopes for the in-process unit of work. Each key
(an applicant, an officer, a project, one room type of a project) gets its
own re-entrant lock, so two approvals competing for the same room type are
serialized while unrelated work proceeds in parallel.
"""

import threading
from typing import Dict, Hashable


class KeyedLockRegistry:
    """
    One ``threading.RLock`` per key, alive only while someone holds or
    waits for it

    ``acquire`` and ``release`` count the holders of each key; the lock is
    dropped from the registry when the last one releases, so the registry
    only ever contains keys that are in use.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.RLock] = {}
        self._holders: Dict[Hashable, int] = {}

    def acquire(self, key: Hashable, timeout: float = -1) -> bool:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            self._holders[key] = self._holders.get(key, 0) + 1

        if lock.acquire(timeout=timeout):
            return True

        with self._guard:
            self._drop_holder(key)
        return False

    def release(self, key: Hashable):
        with self._guard:
            self._locks[key].release()
            self._drop_holder(key)

    def _drop_holder(self, key: Hashable):
        self._holders[key] -= 1
        if not self._holders[key]:
            del self._holders[key]
            del self._locks[key]

    def __contains__(self, key: Hashable) -> bool:
        return key in self._locks

    def __len__(self) -> int:
        return len(self._locks)


def applicant_key(nric: str) -> tuple:
    return ('applicant', nric.upper())


def officer_key(nric: str) -> tuple:
    return ('officer', nric.upper())


def project_key(project_name: str) -> tuple:
    return ('project', project_name.casefold())


def room_key(project_name: str, room_type) -> tuple:
    return ('room', project_name.casefold(), getattr(room_type, 'value', room_type))


def enquiry_key(enquiry_id) -> tuple:
    return ('enquiry', str(enquiry_id))
