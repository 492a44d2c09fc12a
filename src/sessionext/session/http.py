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
"""HTTP date constants and copy-on-write response helpers."""

from __future__ import annotations

import copy
from email.utils import formatdate
from typing import TypeVar

from starlette.responses import Response

R = TypeVar("R", bound=Response)

# Expires value sent with non-cacheable responses.
CACHE_PAST_DATE = "Thu, 19 Nov 1981 08:52:00 GMT"

# Expires timestamp that instructs browsers to drop a cookie.
COOKIE_DELETION_TIMESTAMP = 1

CACHE_HEADERS: tuple[str, ...] = ("Expires", "Cache-Control", "Pragma", "Last-Modified")


def http_date(timestamp: float) -> str:
    """Format *timestamp* as an RFC 7231 IMF-fixdate (``Thu, 01 Jan 1970 00:00:01 GMT``)."""
    return formatdate(timestamp, usegmt=True)


def copy_response(response: R) -> R:
    """Shallow copy of *response* with an independent header list.

    Body, status and background tasks are shared; headers added to the copy
    never show up on the original.
    """
    clone = copy.copy(response)
    clone.raw_headers = list(response.raw_headers)
    # Response.headers caches a view over the original raw_headers list
    clone.__dict__.pop("_headers", None)
    return clone


def with_headers(response: R, headers: dict[str, str]) -> R:
    """Return a copy of *response* with *headers* appended."""
    clone = copy_response(response)
    for name, value in headers.items():
        clone.headers.append(name, value)
    return clone


def has_any_header(response: Response, names: tuple[str, ...]) -> bool:
    return any(name in response.headers for name in names)
