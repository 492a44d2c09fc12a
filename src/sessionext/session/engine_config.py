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
"""EngineConfig: typed persistence settings resolved once at construction."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sessionext.session.settings import PlatformSessionSettings, to_bool

SAME_SITE_VALUES: tuple[str, ...] = ("Strict", "Lax", "None")


@dataclass(frozen=True)
class EngineConfig:
    """Resolved session persistence configuration.

    ``cookie_domain`` and ``cookie_samesite`` are ``None`` when the cookie
    must not carry the attribute at all.
    """

    non_locking: bool = False
    delete_cookie_on_empty_session: bool = False
    cache_limiter: str = "nocache"
    cache_expire: int = 180
    cookie_name: str = "SESSIONEXTID"
    cookie_lifetime: int = 0
    cookie_path: str = "/"
    cookie_domain: str | None = None
    cookie_secure: bool = False
    cookie_httponly: bool = False
    cookie_samesite: str | None = None


def normalize_same_site(value: str) -> str | None:
    """Map ``lax``/``LAX``/... to its canonical spelling, ``None`` if unknown."""
    for candidate in SAME_SITE_VALUES:
        if value.strip().lower() == candidate.lower():
            return candidate
    return None


def _typed(session: Mapping[str, Any], key: str, expected: type) -> Any:
    value = session.get(key)
    if expected is int and isinstance(value, bool):
        return None
    return value if isinstance(value, expected) else None


def _flag(value: Any) -> bool:
    return to_bool(value) if isinstance(value, str) else bool(value)


def resolve_engine_config(
    session: Mapping[str, Any] | None,
    settings: PlatformSessionSettings,
) -> EngineConfig:
    """Resolve the explicit *session* mapping against platform *settings*.

    A key in *session* only counts when it has the expected type (``str``,
    ``int`` or ``bool``); otherwise the platform setting is used, coerced
    permissively.  Locking and empty-session behaviour live under
    ``persistence.ext``::

        {"persistence": {"ext": {"non_locking": True}}}
    """
    session = session or {}
    persistence = session.get("persistence")
    ext = persistence.get("ext") if isinstance(persistence, Mapping) else None
    if not isinstance(ext, Mapping):
        ext = {}

    def string(key: str) -> str:
        value = _typed(session, key, str)
        return value if value is not None else settings.get_str(key)

    def integer(key: str) -> int:
        value = _typed(session, key, int)
        return value if value is not None else settings.get_int(key)

    def boolean(key: str) -> bool:
        value = _typed(session, key, bool)
        return value if value is not None else settings.get_bool(key)

    domain = string("cookie_domain")

    return EngineConfig(
        non_locking=_flag(ext.get("non_locking")),
        delete_cookie_on_empty_session=_flag(ext.get("delete_cookie_on_empty_session")),
        cache_limiter=string("cache_limiter"),
        cache_expire=integer("cache_expire"),
        cookie_name=string("name"),
        cookie_lifetime=integer("cookie_lifetime"),
        cookie_path=string("cookie_path"),
        cookie_domain=domain or None,
        cookie_secure=boolean("cookie_secure"),
        cookie_httponly=boolean("cookie_httponly"),
        cookie_samesite=normalize_same_site(string("cookie_samesite")),
    )
