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
"""CacheHeadersGenerator: HTTP caching headers for session-bearing responses.

=====================  ==============  ===============================  ==========
limiter                Expires         Cache-Control                    Pragma
=====================  ==============  ===============================  ==========
``nocache``            past date       no-store, no-cache, must-rev...  no-cache
``public``             now + max-age   public, max-age=N
``private``            past date       private, max-age=N
``private_no_expire``  (omitted)       private, max-age=N
=====================  ==============  ===============================  ==========

Any other limiter (including ``""``) adds nothing.  ``Last-Modified`` joins
every recognised limiter when a modification time can be determined.
"""

from __future__ import annotations

import os
import sys
import time
from collections.abc import Callable
from typing import TypeVar

from starlette.responses import Response

from sessionext.session.http import CACHE_HEADERS, CACHE_PAST_DATE, has_any_header, http_date, with_headers

R = TypeVar("R", bound=Response)

LastModifiedProvider = Callable[[], float | None]


def script_last_modified() -> float | None:
    """Modification time of the running ``__main__`` script, else of this module."""
    for candidate in (getattr(sys.modules.get("__main__"), "__file__", None), __file__):
        if candidate and os.path.isfile(candidate):
            try:
                return os.path.getmtime(candidate)
            except OSError:
                continue
    return None


class CacheHeadersGenerator:
    """Computes caching headers from a cache limiter and an expiry in minutes."""

    def __init__(
        self,
        cache_limiter: str,
        cache_expire: int,
        last_modified: LastModifiedProvider = script_last_modified,
    ) -> None:
        self._cache_limiter = cache_limiter
        self._cache_expire = cache_expire
        self._last_modified = last_modified

    @property
    def max_age(self) -> int:
        return 60 * self._cache_expire

    def generate(self, now: float | None = None) -> dict[str, str]:
        """Headers for the configured limiter at *now* (defaults to the current time)."""
        now = time.time() if now is None else now
        max_age = self.max_age

        if self._cache_limiter == "nocache":
            headers = {
                "Expires": CACHE_PAST_DATE,
                "Cache-Control": "no-store, no-cache, must-revalidate",
                "Pragma": "no-cache",
            }
        elif self._cache_limiter == "public":
            headers = {
                "Expires": http_date(now + max_age),
                "Cache-Control": f"public, max-age={max_age}",
            }
        elif self._cache_limiter == "private":
            headers = {
                "Expires": CACHE_PAST_DATE,
                "Cache-Control": f"private, max-age={max_age}",
            }
        elif self._cache_limiter == "private_no_expire":
            headers = {"Cache-Control": f"private, max-age={max_age}"}
        else:
            return {}

        last_modified = self._last_modified()
        if last_modified is not None:
            headers["Last-Modified"] = http_date(last_modified)
        return headers

    def add_cache_headers_to_response(self, response: R) -> R:
        """Return *response* untouched if it already sets any caching header, else a copy with them."""
        if has_any_header(response, CACHE_HEADERS):
            return response
        headers = self.generate()
        if not headers:
            return response
        return with_headers(response, headers)
