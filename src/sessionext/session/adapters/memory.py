# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""In-memory session store with per-session locks."""

from __future__ import annotations

import copy
import threading
import time
from typing import Any

from sessionext.session.adapters.base import AbstractSessionStore
from sessionext.session.settings import PlatformSessionSettings


class _Backend:
    """Records and locks shared by every handle of one in-memory store.

    A per-id lock exists only while some handle holds or waits for it.
    """

    def __init__(self) -> None:
        self.records: dict[str, tuple[dict[str, Any], float]] = {}
        self.locks: dict[str, threading.Lock] = {}
        self.lock_users: dict[str, int] = {}
        self.mutex = threading.Lock()

    def checkout(self, session_id: str) -> threading.Lock:
        """Return the lock for *session_id*, registering the caller as a user."""
        with self.mutex:
            self.lock_users[session_id] = self.lock_users.get(session_id, 0) + 1
            return self.locks.setdefault(session_id, threading.Lock())

    def checkin(self, session_id: str) -> None:
        """Release the lock for *session_id*; forget it once nobody uses it."""
        with self.mutex:
            self.locks[session_id].release()
            remaining = self.lock_users[session_id] - 1
            if remaining:
                self.lock_users[session_id] = remaining
            else:
                del self.lock_users[session_id]
                del self.locks[session_id]


class InMemorySessionStore(AbstractSessionStore):
    """Process-local session store.

    Suitable for development, testing, and single-process applications.
    Data is deep-copied in and out so callers never share mutable state with
    the stored record.
    """

    def __init__(
        self,
        settings: PlatformSessionSettings | None = None,
        _backend: _Backend | None = None,
    ) -> None:
        super().__init__(settings)
        self._backend = _backend if _backend is not None else _Backend()
        self._held: set[str] = set()

    def spawn(self) -> InMemorySessionStore:
        return InMemorySessionStore(self._settings, self._backend)

    def records(self) -> dict[str, dict[str, Any]]:
        """Snapshot of every stored record keyed by session id."""
        with self._backend.mutex:
            return {sid: copy.deepcopy(data) for sid, (data, _) in self._backend.records.items()}

    def _exists(self, session_id: str) -> bool:
        with self._backend.mutex:
            return session_id in self._backend.records

    def _acquire(self, session_id: str) -> None:
        self._backend.checkout(session_id).acquire()
        self._held.add(session_id)

    def _release(self, session_id: str) -> None:
        if session_id in self._held:
            self._held.discard(session_id)
            self._backend.checkin(session_id)

    def _read(self, session_id: str) -> dict[str, Any]:
        with self._backend.mutex:
            entry = self._backend.records.setdefault(session_id, ({}, time.time()))
            return copy.deepcopy(entry[0])

    def _write(self, session_id: str, data: dict[str, Any]) -> None:
        with self._backend.mutex:
            self._backend.records[session_id] = (copy.deepcopy(data), time.time())

    def _delete(self, session_id: str) -> None:
        with self._backend.mutex:
            self._backend.records.pop(session_id, None)

    def _collect(self, max_lifetime: int) -> int:
        cutoff = time.time() - max_lifetime
        with self._backend.mutex:
            expired = [sid for sid, (_, touched) in self._backend.records.items() if touched < cutoff]
            for sid in expired:
                del self._backend.records[sid]
        return len(expired)
