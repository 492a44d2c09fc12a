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
"""PlatformSessionSettings: the process-wide session settings registry.

Values are kept the way an ini file or an environment variable provides them:
loosely typed, usually strings.  Consumers coerce at read time through
:meth:`PlatformSessionSettings.get_int`, :meth:`~PlatformSessionSettings.get_bool`
and :meth:`~PlatformSessionSettings.get_str`.
"""

from __future__ import annotations

from typing import Any

from sessionext.core.config import Config

SETTINGS_PREFIX = "sessionext.session"

SETTING_KEYS: tuple[str, ...] = (
    "name",
    "save_handler",
    "save_path",
    "use_strict_mode",
    "use_cookies",
    "use_only_cookies",
    "cookie_lifetime",
    "cookie_path",
    "cookie_domain",
    "cookie_secure",
    "cookie_httponly",
    "cookie_samesite",
    "cache_limiter",
    "cache_expire",
    "gc_maxlifetime",
    "gc_probability",
    "gc_divisor",
)

_TRUE_VALUES = frozenset({"1", "true", "on", "yes"})
_FALSE_VALUES = frozenset({"0", "false", "off", "no", ""})


def parse_bool(value: Any) -> bool | None:
    """Permissive boolean parsing; ``None`` when *value* is not boolean-like.

    Accepts booleans, the integers 0/1 and the strings ``1/0``, ``true/false``,
    ``on/off``, ``yes/no`` (case-insensitive, surrounding whitespace ignored)
    and ``""`` as false.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return {0: False, 1: True}.get(value)
    if value is None:
        return False
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
    return None


def to_bool(value: Any) -> bool:
    """Coerce *value* to a strict boolean; unparseable input becomes ``False``.

    Note that this silently downgrades a misspelled security flag
    (``cookie_secure: "ture"``) to ``False``.
    """
    return parse_bool(value) is True


def to_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


class PlatformSessionSettings:
    """Global session settings consulted when explicit configuration is absent."""

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        if values is None:
            defaults = Config.defaults()
            values = {key: defaults.get(f"{SETTINGS_PREFIX}.{key}") for key in SETTING_KEYS}
        self._values: dict[str, Any] = {k: v for k, v in values.items() if v is not None}

    @classmethod
    def from_config(cls, config: Config) -> PlatformSessionSettings:
        """Packaged defaults overlaid with ``sessionext.session.*`` from *config*.

        Every known key is read through :meth:`Config.get` so environment
        overrides (``SESSIONEXT_SESSION_COOKIE_SECURE=1``) apply as well.
        """
        settings = cls()
        for key in SETTING_KEYS:
            value = config.get(f"{SETTINGS_PREFIX}.{key}")
            if value is not None:
                settings.set(key, value)
        return settings

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> Any:
        """Set *key* and return its previous value."""
        previous = self._values.get(key)
        self._values[key] = value
        return previous

    def get_str(self, key: str, default: str = "") -> str:
        value = self._values.get(key)
        return default if value is None else str(value)

    def get_int(self, key: str, default: int = 0) -> int:
        return to_int(self._values.get(key), default)

    def get_bool(self, key: str) -> bool:
        return to_bool(self._values.get(key))

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"PlatformSessionSettings({self._values!r})"
