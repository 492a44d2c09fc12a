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
"""File-backed session store: one JSON file per session, guarded by flock."""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import IO, Any

from sessionext.kernel.exceptions import SessionStoreException
from sessionext.session.adapters.base import AbstractSessionStore
from sessionext.session.settings import PlatformSessionSettings

_logger = logging.getLogger(__name__)

FILE_PREFIX = "sess_"


class FileSessionStore(AbstractSessionStore):
    """Stores each session as ``<save_path>/sess_<id>``.

    The record file is opened and exclusively ``flock``-ed for as long as the
    session is active, so a second request for the same id blocks until the
    first one closes.  Values are JSON-serialized.
    """

    def __init__(
        self,
        settings: PlatformSessionSettings | None = None,
        save_path: str | Path | None = None,
    ) -> None:
        super().__init__(settings)
        if save_path is None:
            save_path = self._settings.get_str("save_path") or tempfile.gettempdir()
        self._save_path = Path(save_path)
        self._handles: dict[str, IO[bytes]] = {}

    @property
    def save_path(self) -> Path:
        return self._save_path

    def spawn(self) -> FileSessionStore:
        return FileSessionStore(self._settings, self._save_path)

    def path_for(self, session_id: str) -> Path:
        return self._save_path / f"{FILE_PREFIX}{session_id}"

    def _exists(self, session_id: str) -> bool:
        return self.path_for(session_id).is_file()

    def _acquire(self, session_id: str) -> None:
        path = self.path_for(session_id)
        try:
            fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o600)
            handle = os.fdopen(fd, "r+b")
        except OSError as exc:
            raise SessionStoreException(
                f"Cannot open session file '{path}'",
                code="SESSION_STORE_OPEN",
                context={"path": str(path)},
            ) from exc
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
        except OSError as exc:
            handle.close()
            raise SessionStoreException(
                f"Cannot lock session file '{path}'",
                code="SESSION_STORE_LOCK",
                context={"path": str(path)},
            ) from exc
        self._handles[session_id] = handle

    def _release(self, session_id: str) -> None:
        handle = self._handles.pop(session_id, None)
        if handle is None:
            return
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
        finally:
            handle.close()

    def _read(self, session_id: str) -> dict[str, Any]:
        handle = self._handles[session_id]
        try:
            handle.seek(0)
            raw = handle.read()
        except OSError as exc:
            raise SessionStoreException(
                f"Cannot read session file '{self.path_for(session_id)}'",
                code="SESSION_STORE_READ",
            ) from exc
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            _logger.warning("Failed to deserialize session '%s', starting empty", session_id)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, session_id: str, data: dict[str, Any]) -> None:
        try:
            payload = json.dumps(data).encode()
        except (TypeError, ValueError) as exc:
            raise SessionStoreException(
                f"Session '{session_id}' holds data that cannot be JSON-serialized",
                code="SESSION_STORE_SERIALIZE",
            ) from exc

        handle = self._handles[session_id]
        try:
            handle.seek(0)
            handle.truncate()
            handle.write(payload)
            handle.flush()
        except OSError as exc:
            raise SessionStoreException(
                f"Cannot write session file '{self.path_for(session_id)}'",
                code="SESSION_STORE_WRITE",
            ) from exc

    def _delete(self, session_id: str) -> None:
        try:
            self.path_for(session_id).unlink(missing_ok=True)
        except OSError as exc:
            raise SessionStoreException(
                f"Cannot delete session file '{self.path_for(session_id)}'",
                code="SESSION_STORE_DELETE",
            ) from exc

    def _collect(self, max_lifetime: int) -> int:
        cutoff = time.time() - max_lifetime
        removed = 0
        for path in self._save_path.glob(f"{FILE_PREFIX}*"):
            try:
                if path.stat().st_mtime < cutoff:
                    path.unlink()
                    removed += 1
            except FileNotFoundError:
                continue
        return removed
