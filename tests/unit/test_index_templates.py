"""
Tests for the index template APIs.
"""

from datetime import timedelta

import pytest

from elastinest.requests import (
    DeleteIndexTemplateRequest,
    GetIndexTemplateRequest,
    IndexSettingsDescriptor,
    IndexTemplateExistsRequest,
    PutIndexTemplateRequest,
)
from tests.framework import CallRecorder, assert_same_call, expect_json


class TestPutIndexTemplate:
    """Tests for PUT /_template/{name} bodies."""

    @pytest.mark.asyncio
    async def test_fluent_and_initializer_bodies(self, connection_settings):
        """Settings built with the settings descriptor match a plain dictionary."""
        response, request = await assert_same_call(
            connection_settings,
            lambda c: c.put_index_template("nest-template", lambda t: t
                .index_patterns("nest-*")
                .order(1)
                .settings(lambda s: s.number_of_shards(2).number_of_replicas(0))
                .mappings({"doc": {"properties": {"name": {"type": "keyword"}}}})),
            lambda c: c.put_index_template(request=PutIndexTemplateRequest(
                "nest-template",
                index_patterns=["nest-*"],
                order=1,
                settings={"index.number_of_shards": 2, "index.number_of_replicas": 0},
                mappings={"doc": {"properties": {"name": {"type": "keyword"}}}},
            )),
            response={"acknowledged": True},
        )

        assert request.method.value == "PUT"
        assert request.path == "/_template/nest-template"
        expect_json(request.body(), {
            "index_patterns": ["nest-*"],
            "order": 1,
            "settings": {"index.number_of_shards": 2, "index.number_of_replicas": 0},
            "mappings": {"doc": {"properties": {"name": {"type": "keyword"}}}},
        })
        assert response.acknowledged is True

    def test_settings_descriptor(self):
        """Arbitrary settings sit next to the well known ones."""
        settings = (
            IndexSettingsDescriptor()
            .number_of_shards(1)
            .refresh_interval("30s")
            .setting("index.codec", "best_compression")
            .build()
        )
        assert settings == {
            "index.number_of_shards": 1,
            "index.refresh_interval": "30s",
            "index.codec": "best_compression",
        }

    def test_timedelta_query_parameters(self, connection_settings):
        """Timeouts are written in milliseconds."""
        request = PutIndexTemplateRequest("t", master_timeout=timedelta(seconds=5), timeout=timedelta(minutes=1))
        assert request.url(connection_settings) == "/_template/t?master_timeout=5000ms&timeout=60000ms"

    def test_odd_milliseconds_are_exact(self, connection_settings):
        request = GetIndexTemplateRequest("a", master_timeout=timedelta(milliseconds=1001))
        assert request.url(connection_settings) == "/_template/a?master_timeout=1001ms"


class TestGetIndexTemplate:
    """Tests for reading templates back."""

    @pytest.mark.asyncio
    async def test_flat_settings_flag(self, connection_settings):
        """flat_settings goes on the query string; the answer reads the same."""
        body = {"nest-template": {"index_patterns": ["nest-*"], "settings": {"index.number_of_shards": "1"}}}
        recorder = CallRecorder(connection_settings, body)
        response, request = await recorder.call(
            lambda c: c.get_index_template(lambda t: t.name("nest-template").flat_settings())
        )
        await recorder.close()

        assert request.path == "/_template/nest-template?flat_settings=true"
        assert response.is_valid
        assert response.template_mappings["nest-template"].settings.number_of_shards == 1

    @pytest.mark.asyncio
    async def test_missing_template(self, connection_settings):
        """An unknown template answers 404 with an empty object."""
        recorder = CallRecorder(connection_settings, {}, status_code=404)
        response, _ = await recorder.call(lambda c: c.get_index_template(GetIndexTemplateRequest("missing")))
        await recorder.close()

        assert not response.is_valid
        assert response.template_mappings == {}

    @pytest.mark.asyncio
    async def test_exists(self, connection_settings):
        """HEAD answers 200 when the template exists."""
        recorder = CallRecorder(connection_settings, b"")
        response, request = await recorder.call(lambda c: c.index_template_exists("nest-template"))
        await recorder.close()

        assert request.method.value == "HEAD"
        assert response.exists is True


class TestRequestsPassedPositionally:
    """Initializer requests can take the place of the template name."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "call, method",
        [
            (lambda c: c.put_index_template(PutIndexTemplateRequest("a", index_patterns=["a-*"])), "PUT"),
            (lambda c: c.delete_index_template(DeleteIndexTemplateRequest("a")), "DELETE"),
            (lambda c: c.index_template_exists(IndexTemplateExistsRequest("a")), "HEAD"),
        ],
    )
    async def test_template_request(self, connection_settings, call, method):
        recorder = CallRecorder(connection_settings, {"acknowledged": True})
        _, request = await recorder.call(call)
        await recorder.close()

        assert request.method.value == method
        assert request.path == "/_template/a"
