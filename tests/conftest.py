"""
Test fixtures and configuration for elastinest tests.

Unit tests run against in-memory connections and virtual clusters; no
network is involved. Integration tests start a real Elasticsearch via
testcontainers and only run when ELASTINEST_INTEGRATION is set.
"""

import os
from collections.abc import AsyncGenerator

import pytest

from elastinest import ConnectionSettings, ElasticClient
from elastinest.testing import DEFAULT_RESPONSE
from elastinest.serialization import JsonSerializer
from elastinest.transport import InMemoryConnection
from tests.domain import project_settings
from tests.factories import create_projects


@pytest.fixture
def connection_settings() -> ConnectionSettings:
    """Settings with Project, CommitActivity and Developer mapped."""
    return project_settings()


@pytest.fixture
def in_memory_connection() -> InMemoryConnection:
    """Connection answering every call with the root node info body."""
    return InMemoryConnection(JsonSerializer().serialize(DEFAULT_RESPONSE))


@pytest.fixture
async def client(connection_settings, in_memory_connection) -> AsyncGenerator[ElasticClient, None]:
    """Client wired to the in-memory connection."""
    async with ElasticClient(connection_settings, connection=in_memory_connection) as es:
        yield es


@pytest.fixture
def projects():
    """A handful of generated projects."""
    return create_projects(5)


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: Fast unit tests with minimal dependencies")
    config.addinivalue_line("markers", "integration: Integration tests requiring Elasticsearch")
    config.addinivalue_line("markers", "slow: Slow-running tests")
    config.addinivalue_line("markers", "elasticsearch: Tests requiring Elasticsearch connection")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location and dependencies."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.elasticsearch)
            item.add_marker(pytest.mark.slow)

        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def skip_integration_tests_unless_enabled(request):
    """Integration tests need Docker; run them only when asked to."""
    if request.node.get_closest_marker("integration") and not os.environ.get("ELASTINEST_INTEGRATION"):
        pytest.skip("Integration tests disabled; set ELASTINEST_INTEGRATION=1")
