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
"""Native session store protocol."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


class SessionStatus(enum.Enum):
    """Whether a store currently holds an open (locked) session."""

    NONE = "none"
    ACTIVE = "active"


@runtime_checkable
class NativeSessionStore(Protocol):
    """Server-side session storage keyed by session identifier.

    The store tracks one *current* identifier.  ``start()`` opens the record
    for that identifier, holding an exclusive lock on it until
    ``write_close()`` or ``destroy()``; while open, ``storage`` is the
    working copy of the record's data.

    Recognised ``start()`` options: ``read_and_close`` (load data and release
    the lock immediately), ``use_strict_mode`` (refuse identifiers that have
    no stored record), ``use_cookies``, ``use_only_cookies`` and
    ``cache_limiter``.  Stores never emit cookies or headers themselves.
    """

    storage: dict[str, Any]

    @property
    def options(self) -> Mapping[str, Any]: ...

    def session_id(self) -> str: ...

    def set_session_id(self, session_id: str) -> None: ...

    def status(self) -> SessionStatus: ...

    def start(self, options: Mapping[str, Any] | None = None) -> bool: ...

    def write_close(self) -> bool: ...

    def destroy(self) -> bool: ...

    def gc(self, max_lifetime: int) -> int: ...

    def spawn(self) -> NativeSessionStore:
        """Return a fresh handle (no current id, inactive) over the same records."""
        ...
