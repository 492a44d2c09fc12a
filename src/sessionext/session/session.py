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
"""Session: in-memory view of one client's server-side session data."""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from typing import Any

SESSION_LIFETIME_KEY = "__SESSION_TTL__"


class Session:
    """Wraps a session data dictionary with change tracking.

    A session built from freshly loaded data starts unchanged.  Any of
    :meth:`set`, :meth:`unset`, :meth:`clear` or :meth:`persist_session_for`
    marks it changed for the rest of its life.  :meth:`regenerate` returns a
    *new* session flagged for a new identifier; the original is left as is.

    Attributes:
        id: The session identifier, ``""`` until one is assigned.
    """

    def __init__(self, data: Mapping[str, Any] | None = None, session_id: str = "") -> None:
        self._id = session_id
        self._data: dict[str, Any] = dict(data) if data is not None else {}
        self._changed = False
        self._regenerated = False

    @property
    def id(self) -> str:
        return self._id

    def get_id(self) -> str:
        return self._id

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def has(self, name: str) -> bool:
        return name in self._data

    def set(self, name: str, value: Any) -> None:
        self._data[name] = value
        self._changed = True

    def unset(self, name: str) -> None:
        """Remove *name*; removing a missing key still counts as a change."""
        self._data.pop(name, None)
        self._changed = True

    def clear(self) -> None:
        self._data.clear()
        self._changed = True

    def has_changed(self) -> bool:
        """``True`` when the data was mutated or a new identifier was requested."""
        return self._changed or self._regenerated

    def regenerate(self) -> Session:
        """Return a copy of this session flagged for identifier regeneration."""
        clone = copy.copy(self)
        clone._data = dict(self._data)
        clone._regenerated = True
        return clone

    def is_regenerated(self) -> bool:
        return self._regenerated

    def persist_session_for(self, seconds: int) -> None:
        """Ask for the session cookie to live *seconds* instead of the default."""
        self.set(SESSION_LIFETIME_KEY, seconds)

    @property
    def session_lifetime(self) -> int:
        """Lifetime requested via :meth:`persist_session_for`, ``0`` when unset."""
        lifetime = self._data.get(SESSION_LIFETIME_KEY)
        return lifetime if isinstance(lifetime, int) and not isinstance(lifetime, bool) else 0

    def to_dict(self) -> dict[str, Any]:
        """Return a copy of the session data."""
        return dict(self._data)

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return (
            f"Session(id={self._id!r}, keys={sorted(self._data)!r}, "
            f"changed={self._changed}, regenerated={self._regenerated})"
        )
