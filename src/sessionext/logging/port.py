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
"""LoggingPort: how an application wires up sessionext's log output."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from sessionext.core.config import Config


@runtime_checkable
class LoggingPort(Protocol):
    """Configures process logging from the ``sessionext.logging`` section.

    ``create_app`` calls :meth:`configure` once before building the session
    persistence, so store and engine messages use the configured renderer.
    """

    def configure(self, config: Config) -> None: ...

    def get_logger(self, name: str) -> Any:
        """Return a structured logger bound to *name*."""
        ...

    def set_level(self, name: str, level: str) -> None:
        """Adjust the level of one stdlib logger (``"sessionext.session"``)."""
        ...
