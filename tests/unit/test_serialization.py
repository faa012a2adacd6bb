"""
Tests for JSON serialization, request bodies and time units.
"""

import json
from datetime import UTC, date, datetime, timedelta
from enum import Enum

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import BaseModel

from elastinest import IndexName, ResponseDeserializationError
from elastinest.serialization import JsonSerializer, PostData, PostDataKind, format_timedelta
from tests.domain import Project


class State(Enum):
    STABLE = "Stable"


class Counts(BaseModel):
    total: int = 0


class Tagged(BaseModel):
    name: str
    tags: list[str] = []
    note: str | None = None


class TestJsonSerializer:
    """Tests for JsonSerializer."""

    def test_models_drop_none_values(self):
        assert json.loads(JsonSerializer().serialize(Tagged(name="a"))) == {"name": "a", "tags": []}

    def test_compact_by_default(self):
        assert JsonSerializer().serialize({"a": [1, 2]}) == b'{"a":[1,2]}'

    def test_pretty(self, connection_settings):
        serializer = JsonSerializer(connection_settings.model_copy(update={"pretty_json": True}))
        assert serializer.serialize({"a": 1}) == b'{\n  "a": 1\n}'
        assert serializer.serialize({"a": 1}, pretty=False) == b'{"a":1}'

    def test_non_ascii_is_kept(self):
        assert JsonSerializer().serialize({"name": "Élastique"}).decode("utf-8") == '{"name":"Élastique"}'

    def test_plain_values(self):
        serializer = JsonSerializer()
        value = {
            "when": datetime(2017, 1, 1, 12, 30, tzinfo=UTC),
            "day": date(2017, 1, 1),
            "state": State.STABLE,
            "timeout": timedelta(seconds=1),
            "ids": ("a", "b"),
        }
        assert serializer.to_jsonable(value) == {
            "when": "2017-01-01T12:30:00Z",
            "day": "2017-01-01",
            "state": "Stable",
            "timeout": "1000ms",
            "ids": ["a", "b"],
        }

    def test_inferred_names_use_the_settings(self, connection_settings):
        """Index names of document classes resolve through the mappings."""
        serializer = JsonSerializer(connection_settings)
        assert serializer.to_jsonable({"index": IndexName.of(Project)}) == {"index": "project"}

    def test_deserialize(self):
        model = JsonSerializer().deserialize(Tagged, b'{"name": "a", "tags": ["x"]}')
        assert model.name == "a"
        assert model.tags == ["x"]

    @pytest.mark.parametrize("body", [None, b"", ""])
    def test_empty_body_is_an_empty_model(self, body):
        assert JsonSerializer().deserialize(Counts, body).total == 0

    def test_deserialize_error(self):
        with pytest.raises(ResponseDeserializationError) as exc_info:
            JsonSerializer().deserialize(Tagged, b'{"tags": "not a list"}')
        assert exc_info.value.context == {"response_type": "Tagged"}
        assert exc_info.value.original_error is not None


class TestPostData:
    """Tests for the kinds of request body."""

    def test_bytes_and_strings_are_verbatim(self):
        assert PostData.from_bytes(b'{"a":1}').write() == b'{"a":1}'
        assert PostData.from_string('{"ä":1}').write() == '{"ä":1}'.encode("utf-8")

    def test_serializable_is_written_lazily(self, connection_settings):
        """Inferred values resolve against the settings passed to write()."""
        post_data = PostData.serializable({"index": IndexName.of(Project)})
        assert post_data.kind == PostDataKind.SERIALIZABLE
        assert json.loads(post_data.write(connection_settings)) == {"index": "project"}

    def test_multi_json(self):
        post_data = PostData.multi_json([{"index": {}}, {"name": "a"}, '{"raw":true}', b'{"bytes":1}'])
        assert post_data.write() == b'{"index":{}}\n{"name":"a"}\n{"raw":true}\n{"bytes":1}\n'

    def test_multi_json_is_never_pretty(self, connection_settings):
        settings = connection_settings.model_copy(update={"pretty_json": True})
        assert PostData.multi_json([{"a": 1}]).write(settings) == b'{"a":1}\n'

    def test_empty_multi_json(self):
        assert PostData.multi_json([]).write() == b""

    @given(st.lists(st.dictionaries(st.text(min_size=1), st.integers()), min_size=1))
    def test_multi_json_line_per_item(self, items):
        """One line per item, each parseable on its own."""
        written = PostData.multi_json(items).write()
        assert written.endswith(b"\n")
        lines = written.decode("utf-8").split("\n")[:-1]
        assert [json.loads(line) for line in lines] == items


class TestTimeUnits:
    """Tests for format_timedelta."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (timedelta(0), "0ms"),
            (timedelta(milliseconds=250), "250ms"),
            (timedelta(milliseconds=1001), "1001ms"),
            (timedelta(milliseconds=1003), "1003ms"),
            (timedelta(seconds=2), "2000ms"),
            (timedelta(minutes=1), "60000ms"),
            (timedelta(hours=1), "3600000ms"),
        ],
    )
    def test_format_timedelta(self, value, expected):
        assert format_timedelta(value) == expected
