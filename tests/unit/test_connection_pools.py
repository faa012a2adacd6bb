"""
Tests for nodes, connection pools, dead node back-off and sniff parsing.
"""

from datetime import timedelta

import pytest

from elastinest import ConnectionPoolKind, ConnectionSettings
from elastinest.testing import SniffResponseBytes, TestableDateTimeProvider
from elastinest.transport import (
    AuditEvent,
    Node,
    SingleNodeConnectionPool,
    SniffingConnectionPool,
    StaticConnectionPool,
    create_connection_pool,
)
from elastinest.transport.sniff import parse_publish_address, parse_sniff_response

PORTS = [9200, 9201, 9202]


def _uris(ports):
    return [f"localhost:{port}" for port in ports]


def _ports(view):
    return [node.port for node in view]


@pytest.fixture
def clock():
    return TestableDateTimeProvider()


@pytest.fixture
def pool(clock):
    return StaticConnectionPool(_uris(PORTS), clock)


class TestNode:
    """Tests for node addresses and liveness."""

    def test_scheme_is_added(self):
        node = Node("es1:9201")
        assert node.uri == "http://es1:9201"
        assert node.host == "es1"
        assert node.port == 9201

    def test_default_ports(self):
        assert Node("http://es1").port == 9200
        assert Node("https://es1/").port == 443
        assert Node("https://es1/").uri == "https://es1"

    def test_master_only(self):
        assert Node("es1", master_eligible=True, holds_data=False).master_only
        assert not Node("es1").master_only

    def test_dead_and_alive(self, clock):
        node = Node("es1")
        node.mark_dead(clock.now() + timedelta(minutes=1))
        node.mark_dead(clock.now() + timedelta(minutes=2))
        assert not node.is_alive
        assert node.failed_attempts == 2

        node.mark_alive()
        assert node.is_alive
        assert node.failed_attempts == 0
        assert node.dead_until is None

    def test_equality_by_uri(self):
        assert Node("es1:9200") == Node("http://es1:9200/")
        assert len({Node("es1:9200"), Node("http://es1:9200")}) == 1


class TestStaticConnectionPool:
    """Tests for round robin views and dead nodes."""

    def test_round_robin(self, pool):
        assert _ports(pool.create_view()) == [9200, 9201, 9202]
        assert _ports(pool.create_view()) == [9201, 9202, 9200]
        assert _ports(pool.create_view()) == [9202, 9200, 9201]
        assert _ports(pool.create_view()) == [9200, 9201, 9202]

    def test_max_retries(self, pool):
        assert pool.max_retries == 2

    def test_dead_nodes_are_skipped(self, pool, clock):
        pool.nodes[1].mark_dead(clock.now() + timedelta(minutes=1))
        assert _ports(pool.create_view()) == [9200, 9202]

    def test_dead_node_is_resurrected_after_its_dead_time(self, pool, clock):
        pool.nodes[1].mark_dead(clock.now() + timedelta(minutes=1))
        assert _ports(pool.create_view()) == [9200, 9202]
        clock.change_time(lambda now: now + timedelta(minutes=2))

        events = []
        view = list(pool.create_view(lambda event, node: events.append((event, node.port))))

        assert _ports(view) == [9201, 9202, 9200]
        assert view[0].is_resurrected
        assert events == [(AuditEvent.RESURRECTION, 9201)]

    def test_all_nodes_dead(self, pool, clock):
        """The node that comes back soonest is tried on its own."""
        for minutes, node in zip([3, 1, 2], pool.nodes):
            node.mark_dead(clock.now() + timedelta(minutes=minutes))

        events = []
        view = list(pool.create_view(lambda event, node: events.append((event, node.port))))

        assert _ports(view) == [9201]
        assert events == [(AuditEvent.ALL_NODES_DEAD, 9201), (AuditEvent.RESURRECTION, 9201)]

    def test_empty_pool(self):
        with pytest.raises(ValueError):
            StaticConnectionPool([])

    def test_using_ssl(self):
        assert StaticConnectionPool(["https://es1:9200"]).using_ssl
        assert not StaticConnectionPool(["es1:9200"]).using_ssl

    def test_reseed_is_ignored(self, pool):
        pool.reseed([Node("elsewhere:9200")])
        assert _ports(pool.nodes) == PORTS


class TestSingleNodeConnectionPool:
    def test_always_the_same_node(self):
        pool = SingleNodeConnectionPool("localhost:9200")
        pool.nodes[0].mark_dead(pool.date_time_provider.now() + timedelta(minutes=1))
        assert _ports(pool.create_view()) == [9200]
        assert _ports(pool.create_view()) == [9200]
        assert not pool.supports_pinging
        assert not pool.supports_reseeding


class TestSniffingConnectionPool:
    """Tests for replacing the known nodes."""

    def test_reseed(self, clock):
        pool = SniffingConnectionPool(_uris([9200]), clock)
        clock.change_time(lambda now: now + timedelta(minutes=5))
        pool.reseed([
            Node("localhost:9203", master_eligible=False),
            Node("localhost:9202"),
            Node("localhost:9201", master_eligible=True, holds_data=False),
            Node("localhost:9204", http_enabled=False),
            Node("localhost:9202"),
        ])

        assert _ports(pool.nodes) == [9202, 9203]
        assert pool.last_update == clock.now()
        assert _ports(pool.create_view()) == [9202, 9203]

    def test_reseed_without_usable_nodes(self):
        pool = SniffingConnectionPool(_uris(PORTS))
        pool.reseed([Node("localhost:9300", master_eligible=True, holds_data=False)])
        assert _ports(pool.nodes) == PORTS


class TestDeadTime:
    """Back-off grows by sqrt(2) per failure, capped at the maximum."""

    @pytest.mark.parametrize(
        "attempts, seconds",
        [
            (0, 60),
            (1, 84.852),
            (2, 120),
            (4, 240),
        ],
    )
    def test_back_off(self, clock, attempts, seconds):
        until = clock.dead_time(attempts, timedelta(seconds=60), timedelta(minutes=30))
        assert (until - clock.now()).total_seconds() == pytest.approx(seconds, abs=0.01)

    def test_capped(self, clock):
        until = clock.dead_time(50, timedelta(seconds=60), timedelta(minutes=30))
        assert until - clock.now() == timedelta(minutes=30)

    def test_defaults(self, clock):
        assert clock.dead_time(0) - clock.now() == timedelta(minutes=1)


class TestSniffParsing:
    """Tests for nodes info responses."""

    @pytest.mark.parametrize(
        "address, expected",
        [
            ("127.0.0.1:9200", ("127.0.0.1", 9200)),
            ("es1.local/10.0.0.1:9201", ("es1.local", 9201)),
            ("[::1]:9200", ("[::1]", 9200)),
        ],
    )
    def test_parse_publish_address(self, address, expected):
        assert parse_publish_address(address) == expected

    def test_parse_sniff_response(self):
        body = SniffResponseBytes.create([
            Node("localhost:9200"),
            Node("localhost:9201", master_eligible=False),
            Node("localhost:9202", http_enabled=False),
        ])
        nodes = parse_sniff_response(body)

        assert [n.uri for n in nodes] == ["http://127.0.0.1:9200", "http://127.0.0.1:9201"]
        assert nodes[0].master_eligible and nodes[0].holds_data
        assert not nodes[1].master_eligible
        assert nodes[0].settings["cluster.name"] == "elasticsearch-test-cluster"

    def test_fqdn_and_scheme(self):
        body = SniffResponseBytes.create([Node("localhost:9200")], return_fqdn=True)
        assert parse_sniff_response(body, scheme="https")[0].uri == "https://fqdn9200:9200"

    def test_roles_win_over_settings(self):
        body = b"""{"nodes": {"a": {"roles": ["master"], "http": {"publish_address": "10.0.0.1:9200"},
                    "settings": {"node.data": "true"}}}}"""
        node = parse_sniff_response(body)[0]
        assert node.master_only


class TestCreateConnectionPool:
    @pytest.mark.parametrize(
        "hosts, kind, expected",
        [
            ("localhost:9200", None, SingleNodeConnectionPool),
            ("localhost:9200,localhost:9201", None, StaticConnectionPool),
            ("localhost:9200", ConnectionPoolKind.SNIFFING, SniffingConnectionPool),
            ("localhost:9200,localhost:9201", ConnectionPoolKind.STATIC, StaticConnectionPool),
        ],
    )
    def test_pool_kind(self, hosts, kind, expected):
        settings = ConnectionSettings(hosts=hosts, connection_pool=kind)
        assert type(create_connection_pool(settings)) is expected
