"""
Integration tests against a real Elasticsearch.

These tests use testcontainers to start a single node cluster and run the
typed client end to end: root node info, ping, index templates, bulk
indexing and search.
"""

import os
from collections.abc import AsyncGenerator, Generator

import pytest
from testcontainers.elasticsearch import ElasticSearchContainer

from elastinest import ElasticClient
from elastinest.query_dsl import TermQuery
from elastinest.requests import SearchRequest
from tests.domain import Project, project_settings
from tests.factories import create_projects

TEST_ELASTICSEARCH_IMAGE = "docker.elastic.co/elasticsearch/elasticsearch:6.8.23"


@pytest.fixture(scope="module")
def elasticsearch_container() -> Generator[ElasticSearchContainer, None, None]:
    """A single node cluster shared by the tests of this module."""
    if not os.environ.get("ELASTINEST_INTEGRATION"):
        pytest.skip("Integration tests disabled; set ELASTINEST_INTEGRATION=1")
    container = (
        ElasticSearchContainer(TEST_ELASTICSEARCH_IMAGE)
        .with_env("discovery.type", "single-node")
        .with_env("ES_JAVA_OPTS", "-Xms512m -Xmx512m")
    )
    with container as es_container:
        yield es_container


@pytest.fixture
async def es(elasticsearch_container) -> AsyncGenerator[ElasticClient, None]:
    settings = project_settings(hosts=elasticsearch_container.get_url(), sniff_on_startup=False)
    async with ElasticClient(settings) as client:
        yield client


class TestClusterInfo:
    """Tests for the cluster level calls."""

    async def test_root_node_info(self, es):
        response = await es.root_node_info()

        assert response.is_valid
        assert response.version.number.startswith("6.")
        assert response.tagline == "You Know, for Search"

    async def test_ping(self, es):
        response = await es.ping()
        assert response.is_valid


class TestIndexTemplatesIntegration:
    """Put, read back, check and delete a template."""

    async def test_template_lifecycle(self, es):
        put = await es.put_index_template("elastinest-template", lambda t: t
            .index_patterns("elastinest-*")
            .order(1)
            .settings(lambda s: s.number_of_shards(1).number_of_replicas(0)))
        assert put.is_valid
        assert put.acknowledged

        exists = await es.index_template_exists("elastinest-template")
        assert exists.exists

        got = await es.get_index_template(lambda t: t.name("elastinest-template"))
        template = got.template_mappings["elastinest-template"]
        assert template.index_patterns == ["elastinest-*"]
        assert template.settings.number_of_shards == 1

        deleted = await es.delete_index_template("elastinest-template")
        assert deleted.acknowledged

        gone = await es.index_template_exists("elastinest-template")
        assert gone.is_valid
        assert not gone.exists


class TestDocumentsIntegration:
    """Index documents in bulk and search them back."""

    async def test_bulk_and_search(self, es):
        projects = create_projects(5)
        bulk = await es.bulk(lambda b: b.index(Project).index_many(projects).refresh())
        assert bulk.is_valid
        assert not bulk.errors
        assert len(bulk.items) == 5

        response = await es.search(lambda s: s.query(lambda q: q.match_all()).size(10), document_type=Project)
        assert response.is_valid
        assert response.total == 5
        assert {p.name for p in response.documents} == {p.name for p in projects}

        count = await es.count(document_type=Project)
        assert count.count == 5

        first = projects[0]
        by_name = await es.search(SearchRequest(
            document_type=Project,
            query=TermQuery(field="name.keyword", value=first.name),
        ))
        assert [p.name for p in by_name.documents] == [first.name]

    async def test_missing_index(self, es):
        response = await es.search(lambda s: s.index("elastinest-missing"))

        assert not response.is_valid
        assert response.api_call.http_status_code == 404
        assert response.server_error.error.type == "index_not_found_exception"
