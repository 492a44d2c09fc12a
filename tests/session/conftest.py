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
"""Shared fixtures for session persistence tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from sessionext.session.adapters.file import FileSessionStore
from sessionext.session.adapters.memory import InMemorySessionStore
from sessionext.session.persistence import NativeSessionPersistence
from sessionext.session.settings import PlatformSessionSettings


@pytest.fixture
def settings(tmp_path: Path) -> PlatformSessionSettings:
    settings = PlatformSessionSettings()
    settings.set("save_path", str(tmp_path))
    settings.set("gc_probability", "0")
    return settings


@pytest.fixture
def file_store(settings: PlatformSessionSettings) -> FileSessionStore:
    return FileSessionStore(settings)


@pytest.fixture
def memory_store(settings: PlatformSessionSettings) -> InMemorySessionStore:
    return InMemorySessionStore(settings)


@pytest.fixture
def persistence(settings: PlatformSessionSettings, file_store: FileSessionStore) -> NativeSessionPersistence:
    return NativeSessionPersistence(store=file_store, settings=settings)
