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
"""NativeSessionPersistence: bridges request/response sessions to a native session store.

The store is never allowed to deal with cookies or caching headers itself:
every ``start()`` forces ``use_cookies=False``, ``use_only_cookies=True``
and an empty ``cache_limiter``.  The engine reads the session cookie from the
request, and on the way out writes the store record and adds ``Set-Cookie``
(plus caching headers) to a copy of the response.

Identifiers are 16 random bytes rendered as hex.  A session flagged as
regenerated, or a brand-new session that received data, gets a fresh
identifier at persistence time; the previous record, if open, is destroyed.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from starlette.responses import Response

from sessionext.session.adapters.base import generate_session_id
from sessionext.session.adapters.file import FileSessionStore
from sessionext.session.cache_headers import CacheHeadersGenerator
from sessionext.session.cookie import SessionCookie, SessionCookieBuilder
from sessionext.session.engine_config import EngineConfig, resolve_engine_config
from sessionext.session.ports.outbound import NativeSessionStore, SessionStatus
from sessionext.session.session import Session
from sessionext.session.settings import PlatformSessionSettings

_logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Response)

# Applied after caller options so they can never be overridden.
_MANDATORY_START_OPTIONS: dict[str, Any] = {
    "use_cookies": False,
    "use_only_cookies": True,
    "cache_limiter": "",
}


class NativeSessionPersistence:
    """Session persistence backed by a :class:`NativeSessionStore`.

    Args:
        session: Explicit session configuration (``name``, ``cookie_*``,
            ``cache_limiter``, ``cache_expire``, ``persistence.ext.*``).
            Missing or mistyped keys fall back to *settings*.
        store: Store handle; defaults to a :class:`FileSessionStore` over
            ``settings["save_path"]``.
        settings: Platform session settings; defaults to packaged defaults.
    """

    def __init__(
        self,
        session: Mapping[str, Any] | None = None,
        *,
        store: NativeSessionStore | None = None,
        settings: PlatformSessionSettings | None = None,
    ) -> None:
        settings = settings if settings is not None else PlatformSessionSettings()
        self._config = resolve_engine_config(session, settings)
        self._store: NativeSessionStore = store if store is not None else FileSessionStore(settings)
        self._cookies = SessionCookieBuilder(self._config)
        self._cache_headers = CacheHeadersGenerator(self._config.cache_limiter, self._config.cache_expire)

    @classmethod
    def from_config_array(
        cls,
        session: Mapping[str, Any],
        *,
        store: NativeSessionStore | None = None,
        settings: PlatformSessionSettings | None = None,
    ) -> NativeSessionPersistence:
        return cls(session, store=store, settings=settings)

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def store(self) -> NativeSessionStore:
        return self._store

    def is_non_locking(self) -> bool:
        return self._config.non_locking

    def for_request(self) -> NativeSessionPersistence:
        """Copy sharing configuration but holding a fresh store handle.

        The store handle carries per-request state (current id, open record),
        so concurrent requests must each use their own copy.
        """
        clone = copy.copy(self)
        clone._store = self._store.spawn()
        return clone

    def initialize_session_from_request(self, request: Any) -> Session:
        """Load the session named by the request cookie.

        Without a cookie no store record is opened, so cookie-less requests
        never create empty records.  A cookie id the store refuses yields a
        fresh session without an id.
        """
        session_id = self._cookies.get_session_cookie_value(request)
        if not session_id:
            return Session()

        if not self._start_session(session_id, {"read_and_close": self._config.non_locking}):
            # refused id: start over so the first write regenerates
            self._store.set_session_id("")
            return Session()

        # strict mode may have swapped an unknown id for a fresh one
        return Session(self._store.storage, self._store.session_id())

    def persist_session(self, session: Session, response: R) -> R:
        """Write *session* to the store and attach its cookie to a copy of *response*.

        The original response comes back unchanged (same object) when the
        session never got an identifier or did not change.
        """
        session_id = session.get_id()

        if session.is_regenerated() or (session_id == "" and session.has_changed()):
            session_id = self._regenerate_session()
        elif self._config.non_locking and session.has_changed():
            # reopen for writing, the initial read released the lock
            self._start_session(session_id)

        if self._store.status() is SessionStatus.ACTIVE:
            self._store.storage = session.to_dict()
            self._store.write_close()

        if session_id == "":
            return response

        if not session.has_changed():
            return response

        response = self._cookies.add_session_cookie_to_response(response, session_id, session)
        return self._cache_headers.add_cache_headers_to_response(response)

    def initialize_id(self, session: Session) -> Session:
        """Give *session* an identifier now instead of at persistence time.

        Returns *session* itself when it already has a non-regenerated id.
        """
        if session.get_id() == "" or session.is_regenerated():
            session = Session(session.to_dict(), self.generate_session_id())

        self._store.set_session_id(session.get_id())
        return session

    def release_session(self) -> None:
        """Close an open store record without applying session changes."""
        if self._store.status() is SessionStatus.ACTIVE:
            self._store.write_close()

    def create_session_cookie_for_response(self, session_id: str, lifetime: int = 0) -> SessionCookie:
        return self._cookies.create_session_cookie(session_id, lifetime)

    def generate_session_id(self) -> str:
        return generate_session_id()

    def _start_session(self, session_id: str, options: Mapping[str, Any] | None = None) -> bool:
        self._store.set_session_id(session_id)
        return self._store.start({**(options or {}), **_MANDATORY_START_OPTIONS})

    def _regenerate_session(self) -> str:
        if self._store.status() is SessionStatus.ACTIVE:
            self._store.destroy()

        session_id = self.generate_session_id()
        self._start_session(session_id, {"use_strict_mode": False})
        _logger.debug("Session regenerated")
        return session_id
