"""
Connection pools decide which node(s) a call may be sent to.

A pool hands out a view: an ordered sequence of nodes for a single call. The
pipeline walks the view until a node answers or retries run out.
"""

import asyncio
import itertools
import threading
from collections.abc import Callable, Iterable, Iterator

from ..settings import ConnectionPoolKind, TransportSettings
from ..utils.logging import get_logger
from .audit import AuditEvent
from .date_time_provider import DateTimeProvider
from .node import Node

logger = get_logger(__name__)

AuditCallback = Callable[[AuditEvent, Node | None], None]


def _as_nodes(nodes: Iterable[Node | str]) -> list[Node]:
    return [n if isinstance(n, Node) else Node(n) for n in nodes]


class ConnectionPool:
    supports_reseeding = False
    supports_pinging = True

    def __init__(self, nodes: Iterable[Node | str], date_time_provider: DateTimeProvider | None = None):
        self.date_time_provider = date_time_provider or DateTimeProvider()
        self._nodes = _as_nodes(nodes)
        if not self._nodes:
            raise ValueError("A connection pool needs at least one node")
        self._cursor = itertools.count()
        self._lock = threading.Lock()
        self.bootstrap_lock = asyncio.Lock()
        self.sniffed_on_startup = False
        self.last_update = self.date_time_provider.now()

    @property
    def nodes(self) -> list[Node]:
        return list(self._nodes)

    @property
    def max_retries(self) -> int:
        return len(self._nodes) - 1

    @property
    def using_ssl(self) -> bool:
        return any(n.scheme == "https" for n in self._nodes)

    def create_view(self, audit: AuditCallback | None = None) -> Iterator[Node]:
        """
        Yield the nodes to try for one call.

        Live nodes come first in round robin order starting at a global
        cursor. Dead nodes whose dead_until has passed are included and
        flagged as resurrected. When every node is dead the one that comes
        back soonest is resurrected and yielded alone.
        """
        audit = audit or (lambda event, node: None)
        now = self.date_time_provider.now()
        with self._lock:
            cursor = next(self._cursor)
            nodes = [n for n in self._nodes if n.is_alive or (n.dead_until is not None and n.dead_until <= now)]

        if not nodes:
            node = min(self._nodes, key=lambda n: n.dead_until or now)
            node.is_resurrected = True
            audit(AuditEvent.ALL_NODES_DEAD, node)
            audit(AuditEvent.RESURRECTION, node)
            yield node
            return

        position = cursor % len(nodes)
        for _ in range(len(nodes)):
            node = nodes[position]
            position = (position + 1) % len(nodes)
            if not node.is_alive:
                node.is_resurrected = True
                audit(AuditEvent.RESURRECTION, node)
            yield node

    def reseed(self, nodes: Iterable[Node]) -> None:
        """Replace the known nodes; a no-op for pools that do not sniff."""
        return None


class SingleNodeConnectionPool(ConnectionPool):
    """One node that is never pinged, sniffed or taken out of rotation."""

    supports_pinging = False

    def __init__(self, node: Node | str, date_time_provider: DateTimeProvider | None = None):
        super().__init__([node], date_time_provider)

    def create_view(self, audit: AuditCallback | None = None) -> Iterator[Node]:
        yield self._nodes[0]


class StaticConnectionPool(ConnectionPool):
    """A fixed set of nodes in round robin order with dead node resurrection."""


class SniffingConnectionPool(StaticConnectionPool):
    """A static pool whose nodes can be replaced by what the cluster reports."""

    supports_reseeding = True

    def reseed(self, nodes: Iterable[Node]) -> None:
        sniffed = {}
        for node in nodes:
            if node.master_only or not node.http_enabled:
                continue
            sniffed.setdefault(node.uri, node)
        if not sniffed:
            logger.warning("Sniff returned no usable nodes, keeping the current nodes")
            return

        # Master eligible nodes first, then by port
        ordered = sorted(sniffed.values(), key=lambda n: (not n.master_eligible, n.port))
        with self._lock:
            self._nodes = ordered
            self._cursor = itertools.count()
            self.last_update = self.date_time_provider.now()
        logger.info(
            "Connection pool reseeded",
            extra={"nodes": [n.uri for n in ordered]},
        )


def create_connection_pool(settings: TransportSettings, date_time_provider: DateTimeProvider | None = None) -> ConnectionPool:
    hosts = settings.host_list
    kind = settings.effective_pool_kind
    if kind == ConnectionPoolKind.SINGLE:
        return SingleNodeConnectionPool(hosts[0], date_time_provider)
    if kind == ConnectionPoolKind.SNIFFING:
        return SniffingConnectionPool(hosts, date_time_provider)
    return StaticConnectionPool(hosts, date_time_provider)
