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
"""Request filter contract shared by the session filter and application filters."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

# Invokes the rest of the chain (remaining filters, then the route handler).
CallNext = Callable[[Any], Awaitable[Any]]


@runtime_checkable
class WebFilter(Protocol):
    """Wraps request handling; runs inside ``WebFilterChainMiddleware``.

    Request and response stay ``Any`` here so filters can be exercised with
    lightweight stand-ins.  In the Starlette adapter the response a filter
    receives from *call_next* is always a fully buffered ``Response``.
    """

    async def do_filter(self, request: Any, call_next: CallNext) -> Any: ...

    def should_not_filter(self, request: Any) -> bool: ...
