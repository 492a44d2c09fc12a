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
"""Builds a NativeSessionPersistence from application configuration.

Example ``sessionext.yaml``::

    sessionext:
      session:
        save_handler: files        # or "memory"
        save_path: /var/lib/app/sessions
    session:
      cookie_secure: true
      persistence:
        ext:
          non_locking: true
          delete_cookie_on_empty_session: false
"""

from __future__ import annotations

import logging

from sessionext.core.config import Config
from sessionext.session.adapters.file import FileSessionStore
from sessionext.session.adapters.memory import InMemorySessionStore
from sessionext.session.persistence import NativeSessionPersistence
from sessionext.session.ports.outbound import NativeSessionStore
from sessionext.session.settings import PlatformSessionSettings

_logger = logging.getLogger(__name__)


def create_session_store(settings: PlatformSessionSettings) -> NativeSessionStore:
    """Pick the store adapter named by the ``save_handler`` setting."""
    handler = settings.get_str("save_handler", "files").lower()
    if handler == "memory":
        return InMemorySessionStore(settings)
    if handler != "files":
        _logger.warning("Unknown session save_handler '%s', using files", handler)
    return FileSessionStore(settings)


class NativeSessionPersistenceFactory:
    """Callable factory: ``NativeSessionPersistenceFactory()(config)``."""

    def __call__(self, config: Config | None = None) -> NativeSessionPersistence:
        config = config if config is not None else Config.defaults()
        settings = PlatformSessionSettings.from_config(config)
        session = config.get_section("session")
        persistence = NativeSessionPersistence(
            session,
            store=create_session_store(settings),
            settings=settings,
        )
        _logger.debug(
            "Session persistence ready (cookie=%s, non_locking=%s)",
            persistence.config.cookie_name,
            persistence.is_non_locking(),
        )
        return persistence
