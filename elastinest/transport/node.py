"""A single Elasticsearch node as seen by a connection pool."""

from datetime import datetime
from typing import Any
from urllib.parse import urlsplit


class Node:
    """
    Node address plus the liveness state the pool tracks for it.

    A node marked dead stays out of rotation until dead_until passes. It is
    then handed out again as resurrected and must answer a ping before it
    receives the actual request.
    """

    def __init__(
        self,
        uri: str,
        *,
        node_id: str | None = None,
        name: str | None = None,
        master_eligible: bool = True,
        holds_data: bool = True,
        http_enabled: bool = True,
        ingest_enabled: bool = True,
        settings: dict[str, Any] | None = None,
    ):
        if "://" not in uri:
            uri = f"http://{uri}"
        self.uri = uri.rstrip("/")
        parts = urlsplit(self.uri)
        self.scheme = parts.scheme
        self.host = parts.hostname or "localhost"
        self.port = parts.port or (443 if parts.scheme == "https" else 9200)

        self.id = node_id
        self.name = name
        self.master_eligible = master_eligible
        self.holds_data = holds_data
        self.http_enabled = http_enabled
        self.ingest_enabled = ingest_enabled
        self.settings = settings or {}

        self.is_alive = True
        self.is_resurrected = False
        self.failed_attempts = 0
        self.dead_until: datetime | None = None

    @property
    def master_only(self) -> bool:
        return self.master_eligible and not self.holds_data

    def mark_dead(self, until: datetime) -> None:
        self.failed_attempts += 1
        self.is_alive = False
        self.is_resurrected = False
        self.dead_until = until

    def mark_alive(self) -> None:
        self.failed_attempts = 0
        self.is_alive = True
        self.is_resurrected = False
        self.dead_until = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.uri == other.uri

    def __hash__(self) -> int:
        return hash(self.uri)

    def __repr__(self) -> str:
        state = "alive" if self.is_alive else f"dead until {self.dead_until}"
        return f"Node({self.uri}, {state})"
