"""Parsing of GET /_nodes/http,settings responses into nodes."""

import json
from typing import Any

from pydantic import BaseModel, Field

from .node import Node


class NodeHttpInfo(BaseModel):
    bound_address: list[str] = Field(default_factory=list)
    publish_address: str | None = None


class NodeInfo(BaseModel):
    name: str | None = None
    host: str | None = None
    ip: str | None = None
    version: str | None = None
    roles: list[str] | None = None
    http: NodeHttpInfo | None = None
    settings: dict[str, Any] = Field(default_factory=dict)

    def _setting(self, key: str, default: bool = True) -> bool:
        value = self.settings.get(key)
        if value is None:
            return default
        return str(value).lower() == "true"

    @property
    def master_eligible(self) -> bool:
        if self.roles is not None:
            return "master" in self.roles
        return self._setting("node.master")

    @property
    def holds_data(self) -> bool:
        if self.roles is not None:
            return "data" in self.roles
        return self._setting("node.data")

    @property
    def ingest_enabled(self) -> bool:
        if self.roles is not None:
            return "ingest" in self.roles
        return self._setting("node.ingest")

    @property
    def http_enabled(self) -> bool:
        return self.http is not None and self._setting("http.enabled")


class SniffResponse(BaseModel):
    cluster_name: str | None = None
    nodes: dict[str, NodeInfo] = Field(default_factory=dict)

    def to_nodes(self, scheme: str = "http") -> list[Node]:
        nodes = []
        for node_id, info in self.nodes.items():
            if info.http is None or not info.http.publish_address:
                continue
            host, port = parse_publish_address(info.http.publish_address)
            nodes.append(Node(
                f"{scheme}://{host}:{port}",
                node_id=node_id,
                name=info.name,
                master_eligible=info.master_eligible,
                holds_data=info.holds_data,
                http_enabled=info.http_enabled,
                ingest_enabled=info.ingest_enabled,
                settings=info.settings,
            ))
        return nodes


def parse_publish_address(address: str) -> tuple[str, int]:
    """
    Split a publish address into host and port.

    Accepts "ip:port", "fqdn/ip:port" (the host name is preferred) and
    bracketed IPv6 addresses.
    """
    fqdn = None
    if "/" in address:
        fqdn, _, address = address.partition("/")
    host, _, port = address.rpartition(":")
    if fqdn:
        host = fqdn
    return host, int(port)


def parse_sniff_response(body: bytes | str, scheme: str = "http") -> list[Node]:
    data = json.loads(body)
    return SniffResponse.model_validate(data).to_nodes(scheme)
