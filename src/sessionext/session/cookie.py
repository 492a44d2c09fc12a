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
"""Session cookie construction."""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any, TypeVar

from starlette.responses import Response

from sessionext.session.engine_config import EngineConfig
from sessionext.session.http import COOKIE_DELETION_TIMESTAMP, copy_response
from sessionext.session.session import SESSION_LIFETIME_KEY, Session

R = TypeVar("R", bound=Response)


@dataclass(frozen=True)
class SessionCookie:
    """A ``Set-Cookie`` instruction for the session identifier.

    Attributes:
        expires: Absolute UNIX timestamp; ``0`` for a browser-session cookie.
    """

    name: str
    value: str
    expires: int = 0
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    http_only: bool = False
    same_site: str | None = None

    def apply(self, response: Response) -> None:
        """Append this cookie to *response* (mutates the given response)."""
        expires: datetime | None = None
        if self.expires:
            expires = datetime.fromtimestamp(self.expires, tz=UTC)
        response.set_cookie(
            key=self.name,
            value=self.value,
            expires=expires,
            path=self.path or None,  # type: ignore[arg-type]
            domain=self.domain,
            secure=self.secure,
            httponly=self.http_only,
            samesite=self.same_site,  # type: ignore[arg-type]
        )


class SessionCookieBuilder:
    """Reads the session cookie from requests and writes it to responses."""

    def __init__(self, config: EngineConfig) -> None:
        self._config = config

    @property
    def cookie_name(self) -> str:
        return self._config.cookie_name

    def get_session_cookie_value(self, request: Any) -> str:
        """Session id carried by *request*, ``""`` when the cookie is absent."""
        cookies = getattr(request, "cookies", None) or {}
        return str(cookies.get(self._config.cookie_name) or "")

    def create_session_cookie(self, session_id: str, lifetime: int = 0) -> SessionCookie:
        cfg = self._config
        return SessionCookie(
            name=cfg.cookie_name,
            value=session_id,
            expires=int(time.time()) + lifetime if lifetime > 0 else 0,
            path=cfg.cookie_path,
            domain=cfg.cookie_domain,
            secure=cfg.cookie_secure,
            http_only=cfg.cookie_httponly,
            same_site=cfg.cookie_samesite,
        )

    def session_lifetime(self, session: Session) -> int:
        """Lifetime requested by the session itself, else the configured default."""
        if session.has(SESSION_LIFETIME_KEY):
            return session.session_lifetime
        return self._config.cookie_lifetime

    def add_session_cookie_to_response(self, response: R, session_id: str, session: Session) -> R:
        """Return a copy of *response* carrying the session cookie.

        An emptied session is answered with a deletion cookie (empty value,
        1970 expiry) when ``delete_cookie_on_empty_session`` is enabled.
        """
        if self._config.delete_cookie_on_empty_session and not len(session):
            cookie = replace(self.create_session_cookie(""), expires=COOKIE_DELETION_TIMESTAMP)
        else:
            cookie = self.create_session_cookie(session_id, self.session_lifetime(session))

        clone = copy_response(response)
        cookie.apply(clone)
        return clone
