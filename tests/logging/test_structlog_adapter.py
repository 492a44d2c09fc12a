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
"""Tests for StructlogAdapter: default LoggingPort implementation."""

import json
import logging
from typing import Any

from sessionext.core.config import Config
from sessionext.logging.port import LoggingPort
from sessionext.logging.structlog_adapter import StructlogAdapter


class TestLoggingPortProtocol:
    def test_conforming_class_is_instance(self):
        class FakeLogging:
            def configure(self, config: Any) -> None:
                pass

            def get_logger(self, name: str) -> Any:
                pass

            def set_level(self, name: str, level: str) -> None:
                pass

        assert isinstance(FakeLogging(), LoggingPort)

    def test_non_conforming_class_is_not_instance(self):
        class Incomplete:
            def get_logger(self, name: str) -> Any:
                pass

        assert not isinstance(Incomplete(), LoggingPort)

    def test_adapter_implements_port(self):
        assert isinstance(StructlogAdapter(), LoggingPort)


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._root_level == "INFO"
        assert adapter._format == "console"

    def test_configure_from_packaged_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config.defaults())
        assert adapter._root_level == "INFO"
        assert adapter._module_levels == {}

    def test_configure_reads_root_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"sessionext": {"logging": {"level": {"root": "debug"}}}}))
        assert adapter._root_level == "DEBUG"
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_reads_format(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"sessionext": {"logging": {"format": "JSON"}}}))
        assert adapter._format == "json"

    def test_configure_reads_per_module_levels(self):
        adapter = StructlogAdapter()
        config = Config({"sessionext": {"logging": {"level": {"root": "INFO", "sessionext.session": "DEBUG"}}}})
        adapter.configure(config)
        assert adapter._module_levels == {"sessionext.session": "DEBUG"}
        assert logging.getLogger("sessionext.session").level == logging.DEBUG

    def test_configure_replaces_root_handlers(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        adapter.configure(Config({}))
        assert len(logging.getLogger().handlers) == 1

    def test_json_format_renders_stdlib_records(self, capsys):
        adapter = StructlogAdapter()
        adapter.configure(Config({"sessionext": {"logging": {"format": "json"}}}))

        logging.getLogger("sessionext.test").warning("Session '%s' rejected", "abc")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "Session 'abc' rejected"
        assert record["level"] == "warning"
        assert record["logger"] == "sessionext.test"


class TestStructlogAdapterGetLogger:
    def test_get_logger_returns_bound_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        logger = adapter.get_logger("sessionext.test")
        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "debug", None))


class TestStructlogAdapterSetLevel:
    def test_set_level_updates_module_level(self):
        adapter = StructlogAdapter()
        adapter.set_level("sessionext.web", "warning")
        assert logging.getLogger("sessionext.web").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        adapter = StructlogAdapter()
        adapter.set_level("sessionext.other", "LOUD")
        assert logging.getLogger("sessionext.other").level == logging.INFO
