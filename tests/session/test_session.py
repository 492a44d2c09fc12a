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
"""Tests for Session: change tracking, regeneration and lifetime override."""

from sessionext.session.session import SESSION_LIFETIME_KEY, Session


class TestSessionData:
    def test_new_session_is_empty_and_unchanged(self):
        session = Session()
        assert session.get_id() == ""
        assert session.id == ""
        assert len(session) == 0
        assert not session.has_changed()
        assert not session.is_regenerated()

    def test_loaded_data_does_not_count_as_change(self):
        session = Session({"foo": "bar"}, "abc")
        assert session.get("foo") == "bar"
        assert session.has("foo")
        assert "foo" in session
        assert not session.has_changed()

    def test_get_default(self):
        assert Session().get("missing", 42) == 42

    def test_set_marks_changed(self):
        session = Session()
        session.set("foo", "bar")
        assert session.has_changed()
        assert session.to_dict() == {"foo": "bar"}

    def test_unset_missing_key_still_marks_changed(self):
        session = Session({"foo": "bar"})
        session.unset("missing")
        assert session.has_changed()
        assert session.to_dict() == {"foo": "bar"}

    def test_clear(self):
        session = Session({"foo": "bar", "baz": 1})
        session.clear()
        assert session.has_changed()
        assert len(session) == 0

    def test_to_dict_is_a_copy(self):
        session = Session({"foo": "bar"})
        snapshot = session.to_dict()
        snapshot["foo"] = "changed"
        assert session.get("foo") == "bar"

    def test_source_mapping_not_aliased(self):
        data = {"foo": "bar"}
        session = Session(data)
        session.set("foo", "baz")
        assert data == {"foo": "bar"}

    def test_iteration(self):
        assert sorted(Session({"a": 1, "b": 2})) == ["a", "b"]


class TestSessionRegeneration:
    def test_regenerate_returns_flagged_copy(self):
        session = Session({"foo": "bar"}, "abc")
        regenerated = session.regenerate()

        assert regenerated is not session
        assert regenerated.is_regenerated()
        assert regenerated.has_changed()
        assert regenerated.get_id() == "abc"
        assert regenerated.to_dict() == {"foo": "bar"}
        assert not session.is_regenerated()
        assert not session.has_changed()

    def test_regenerated_copy_has_own_data(self):
        session = Session({"foo": "bar"})
        regenerated = session.regenerate()
        regenerated.set("foo", "baz")
        assert session.get("foo") == "bar"


class TestSessionLifetime:
    def test_persist_session_for_stores_lifetime(self):
        session = Session()
        session.persist_session_for(300)
        assert session.has_changed()
        assert session.get(SESSION_LIFETIME_KEY) == 300
        assert session.session_lifetime == 300

    def test_lifetime_defaults_to_zero(self):
        assert Session().session_lifetime == 0

    def test_non_integer_lifetime_ignored(self):
        assert Session({SESSION_LIFETIME_KEY: "300"}).session_lifetime == 0
        assert Session({SESSION_LIFETIME_KEY: True}).session_lifetime == 0
