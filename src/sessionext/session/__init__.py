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
"""Session persistence over a native, cookie-addressed session store.

Import concrete store types from the adapter package::

    from sessionext.session.adapters.file import FileSessionStore
    from sessionext.session.adapters.memory import InMemorySessionStore
"""

from sessionext.session.cache_headers import CacheHeadersGenerator
from sessionext.session.cookie import SessionCookie, SessionCookieBuilder
from sessionext.session.engine_config import EngineConfig, resolve_engine_config
from sessionext.session.factory import NativeSessionPersistenceFactory
from sessionext.session.filter import SessionPersistenceFilter
from sessionext.session.persistence import NativeSessionPersistence
from sessionext.session.ports.outbound import NativeSessionStore, SessionStatus
from sessionext.session.session import SESSION_LIFETIME_KEY, Session
from sessionext.session.settings import PlatformSessionSettings

__all__ = [
    "SESSION_LIFETIME_KEY",
    "CacheHeadersGenerator",
    "EngineConfig",
    "NativeSessionPersistence",
    "NativeSessionPersistenceFactory",
    "NativeSessionStore",
    "PlatformSessionSettings",
    "Session",
    "SessionCookie",
    "SessionCookieBuilder",
    "SessionPersistenceFilter",
    "SessionStatus",
    "resolve_engine_config",
]
