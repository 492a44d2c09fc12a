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
"""Starlette application factory with session persistence installed."""

from __future__ import annotations

from collections.abc import Sequence

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from sessionext.core.config import Config
from sessionext.logging.port import LoggingPort
from sessionext.logging.structlog_adapter import StructlogAdapter
from sessionext.session.factory import NativeSessionPersistenceFactory
from sessionext.session.filter import SessionPersistenceFilter
from sessionext.session.persistence import NativeSessionPersistence
from sessionext.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from sessionext.web.ports.filter import WebFilter


def create_app(
    config: Config | None = None,
    routes: Sequence[BaseRoute] = (),
    filters: Sequence[WebFilter] = (),
    persistence: NativeSessionPersistence | None = None,
    logging_port: LoggingPort | None = None,
    debug: bool = False,
) -> Starlette:
    """Create a Starlette application whose handlers see ``request.state.session``.

    The session filter runs first, so *filters* observe the loaded session
    and their response changes happen before the session cookie is added.
    """
    config = config if config is not None else Config.defaults()

    logging_port = logging_port if logging_port is not None else StructlogAdapter()
    logging_port.configure(config)

    if persistence is None:
        persistence = NativeSessionPersistenceFactory()(config)

    chain: list[WebFilter] = [SessionPersistenceFilter(persistence), *filters]

    return Starlette(
        debug=debug,
        routes=list(routes),
        middleware=[Middleware(WebFilterChainMiddleware, filters=chain)],
    )
