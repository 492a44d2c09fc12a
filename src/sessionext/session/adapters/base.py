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
"""AbstractSessionStore: the open/lock/close state machine shared by adapters."""

from __future__ import annotations

import abc
import logging
import random
import re
import secrets
from collections.abc import Mapping
from typing import Any, Self

from sessionext.session.ports.outbound import SessionStatus
from sessionext.session.settings import PlatformSessionSettings, to_bool

_logger = logging.getLogger(__name__)

_VALID_ID_RE = re.compile(r"^[A-Za-z0-9,-]{1,256}$")


def generate_session_id() -> str:
    """32 lowercase hex characters from 16 cryptographically random bytes."""
    return secrets.token_hex(16)


def is_valid_session_id(session_id: str) -> bool:
    return bool(_VALID_ID_RE.match(session_id))


class AbstractSessionStore(abc.ABC):
    """Base class for :class:`~sessionext.session.ports.outbound.NativeSessionStore` adapters.

    An instance is a *handle*: it tracks the current identifier, whether a
    session is open and the working ``storage`` for one request.  Records and
    locks live in the backend shared by every handle obtained through
    :meth:`spawn`.  Subclasses implement the record primitives only.
    """

    def __init__(self, settings: PlatformSessionSettings | None = None) -> None:
        self._settings = settings if settings is not None else PlatformSessionSettings()
        self._session_id = ""
        self._status = SessionStatus.NONE
        self._options: dict[str, Any] = {}
        self.storage: dict[str, Any] = {}

    # -- handle state --------------------------------------------------------

    @property
    def options(self) -> Mapping[str, Any]:
        """Effective options of the most recent :meth:`start` call."""
        return dict(self._options)

    def session_id(self) -> str:
        return self._session_id

    def set_session_id(self, session_id: str) -> None:
        if self._status is SessionStatus.ACTIVE:
            _logger.warning("Cannot change the id of active session '%s'", self._session_id)
            return
        self._session_id = session_id

    def status(self) -> SessionStatus:
        return self._status

    @abc.abstractmethod
    def spawn(self) -> Self:
        """Return a fresh handle sharing this store's backend."""

    # -- lifecycle -----------------------------------------------------------

    def start(self, options: Mapping[str, Any] | None = None) -> bool:
        """Open the record for the current id.

        Without an id one is generated, unless ``use_only_cookies`` requires
        the id to come from the client.  Returns ``False`` (leaving the handle
        inactive with empty storage) when a session is already open, the id is
        missing under ``use_only_cookies`` or the id is malformed.
        """
        if self._status is SessionStatus.ACTIVE:
            _logger.warning("Session '%s' is already active, ignoring start()", self._session_id)
            return False

        effective = self._default_options()
        effective.update(options or {})
        self._options = effective

        if not self._session_id and to_bool(effective.get("use_only_cookies")):
            _logger.warning("Refusing to start a session without an id while use_only_cookies is set")
            self.storage = {}
            return False

        session_id = self._session_id or generate_session_id()
        if not is_valid_session_id(session_id):
            _logger.warning("Rejected session id containing illegal characters or of invalid length")
            self.storage = {}
            return False

        if to_bool(effective.get("use_strict_mode")) and not self._exists(session_id):
            _logger.debug("Strict mode: replacing uninitialized session id")
            session_id = generate_session_id()
        self._session_id = session_id

        self._maybe_collect_garbage()

        self._acquire(session_id)
        try:
            self.storage = self._read(session_id)
        except BaseException:
            self._release(session_id)
            raise

        if to_bool(effective.get("read_and_close")):
            self._release(session_id)
            _logger.debug("Session '%s' read and released", session_id)
            return True

        self._status = SessionStatus.ACTIVE
        _logger.debug("Session '%s' started", session_id)
        return True

    def write_close(self) -> bool:
        """Write ``storage`` to the record and release the lock."""
        if self._status is not SessionStatus.ACTIVE:
            return False
        try:
            self._write(self._session_id, self.storage)
        finally:
            self._release(self._session_id)
            self._status = SessionStatus.NONE
        _logger.debug("Session '%s' written and closed", self._session_id)
        return True

    def destroy(self) -> bool:
        """Delete the open record and release the lock."""
        if self._status is not SessionStatus.ACTIVE:
            _logger.warning("Trying to destroy an uninitialized session")
            return False
        try:
            self._delete(self._session_id)
        finally:
            self._release(self._session_id)
            self._status = SessionStatus.NONE
            self.storage = {}
        _logger.debug("Session '%s' destroyed", self._session_id)
        return True

    def gc(self, max_lifetime: int) -> int:
        """Remove records untouched for more than *max_lifetime* seconds."""
        removed = self._collect(max_lifetime)
        if removed:
            _logger.debug("Garbage-collected %d expired session(s)", removed)
        return removed

    def _default_options(self) -> dict[str, Any]:
        return {
            "read_and_close": False,
            "use_strict_mode": self._settings.get("use_strict_mode", "0"),
            "use_cookies": self._settings.get("use_cookies", "1"),
            "use_only_cookies": self._settings.get("use_only_cookies", "1"),
            "cache_limiter": self._settings.get_str("cache_limiter"),
        }

    def _maybe_collect_garbage(self) -> None:
        probability = self._settings.get_int("gc_probability")
        divisor = self._settings.get_int("gc_divisor", 100)
        if probability <= 0 or divisor <= 0:
            return
        if random.randrange(divisor) < probability:
            self.gc(self._settings.get_int("gc_maxlifetime", 1440))

    # -- record primitives ---------------------------------------------------

    @abc.abstractmethod
    def _exists(self, session_id: str) -> bool: ...

    @abc.abstractmethod
    def _acquire(self, session_id: str) -> None:
        """Block until the exclusive lock on *session_id* is held."""

    @abc.abstractmethod
    def _release(self, session_id: str) -> None: ...

    @abc.abstractmethod
    def _read(self, session_id: str) -> dict[str, Any]:
        """Return the stored data, creating an empty record when missing."""

    @abc.abstractmethod
    def _write(self, session_id: str, data: dict[str, Any]) -> None: ...

    @abc.abstractmethod
    def _delete(self, session_id: str) -> None: ...

    @abc.abstractmethod
    def _collect(self, max_lifetime: int) -> int: ...
