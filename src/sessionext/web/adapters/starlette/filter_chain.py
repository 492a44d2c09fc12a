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
"""WebFilterChainMiddleware: runs WebFilters around a Starlette application."""

from __future__ import annotations

from collections.abc import Sequence
from typing import cast

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from sessionext.web.ports.filter import CallNext, WebFilter


async def _buffered_response(app: ASGIApp, scope: Scope, receive: Receive) -> Response:
    """Run *app* and collect everything it sends into a single :class:`Response`."""
    start: Message = {"status": 200, "headers": []}
    chunks: list[bytes] = []

    async def _collect(message: Message) -> None:
        nonlocal start
        if message["type"] == "http.response.start":
            start = message
        elif message["type"] == "http.response.body":
            chunks.append(message.get("body", b""))

    await app(scope, receive, _collect)

    response = Response(content=b"".join(chunks), status_code=start["status"])
    response.raw_headers[:] = list(start.get("headers", []))
    return response


class WebFilterChainMiddleware:
    """Pure ASGI middleware executing *filters* in order, first one outermost.

    The downstream response is buffered so filters can inspect it and add
    headers (the session cookie in particular) before anything is sent.
    Non-HTTP scopes bypass the filters.
    """

    def __init__(self, app: ASGIApp, filters: Sequence[WebFilter] = ()) -> None:
        self.app = app
        self._filters = tuple(filters)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def _call_app(request: Request) -> Response:
            return await _buffered_response(self.app, scope, receive)

        chain: CallNext = _call_app
        for web_filter in reversed(self._filters):
            chain = _wrap(web_filter, chain)

        response = cast(Response, await chain(Request(scope, receive, send)))
        await response(scope, receive, send)


def _wrap(web_filter: WebFilter, next_call: CallNext) -> CallNext:
    """Create a closure that conditionally invokes *web_filter*."""

    async def _inner(request: Request) -> Response:
        if web_filter.should_not_filter(request):
            return cast(Response, await next_call(request))
        return cast(Response, await web_filter.do_filter(request, next_call))

    return _inner
