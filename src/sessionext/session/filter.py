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
"""SessionPersistenceFilter: loads the session before the handler, persists it after."""

from __future__ import annotations

from typing import Any

import anyio.to_thread
from anyio import CapacityLimiter

from sessionext.session.persistence import NativeSessionPersistence
from sessionext.web.filters import OncePerRequestFilter
from sessionext.web.ports.filter import CallNext

DEFAULT_MAX_PENDING_OPENS = 40


class SessionPersistenceFilter(OncePerRequestFilter):
    """Exposes the request's :class:`Session` as ``request.state.session``.

    Handlers mutate it in place, or replace it to request a new identifier::

        request.state.session = request.state.session.regenerate()

    Store calls block on file locks, so they run in worker threads.  Opening a
    session may wait for another request holding the same id; those waits use
    a dedicated limiter of *max_pending_opens* threads, while writing and
    releasing use the default thread limiter, so a request waiting for a lock
    never occupies a thread the lock holder needs to close its session.
    """

    def __init__(
        self,
        persistence: NativeSessionPersistence,
        max_pending_opens: int = DEFAULT_MAX_PENDING_OPENS,
    ) -> None:
        self._persistence = persistence
        self._max_pending_opens = max_pending_opens
        self._open_limiter: CapacityLimiter | None = None

    def _opening_limiter(self) -> CapacityLimiter:
        # created lazily: a limiter needs a running event loop
        if self._open_limiter is None:
            self._open_limiter = CapacityLimiter(self._max_pending_opens)
        return self._open_limiter

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        persistence = self._persistence.for_request()
        session = await anyio.to_thread.run_sync(
            persistence.initialize_session_from_request,
            request,
            limiter=self._opening_limiter(),
        )
        request.state.session = session

        try:
            response = await call_next(request)
        except BaseException:
            await anyio.to_thread.run_sync(persistence.release_session)
            raise

        session = getattr(request.state, "session", session)
        return await anyio.to_thread.run_sync(persistence.persist_session, session, response)
