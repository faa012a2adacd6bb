"""Low level transport: nodes, pools, connections and the request pipeline."""

from .audit import Audit, AuditEvent
from .call_details import ApiCallDetails
from .connection import Connection, HttpConnection, InMemoryConnection
from .connection_pool import (
    ConnectionPool,
    SingleNodeConnectionPool,
    SniffingConnectionPool,
    StaticConnectionPool,
    create_connection_pool,
)
from .date_time_provider import DateTimeProvider
from .node import Node
from .pipeline import RequestPipeline
from .request_data import HttpMethod, RequestConfiguration, RequestData
from .transport import Transport

__all__ = [
    "ApiCallDetails",
    "Audit",
    "AuditEvent",
    "Connection",
    "ConnectionPool",
    "DateTimeProvider",
    "HttpConnection",
    "HttpMethod",
    "InMemoryConnection",
    "Node",
    "RequestConfiguration",
    "RequestData",
    "RequestPipeline",
    "SingleNodeConnectionPool",
    "SniffingConnectionPool",
    "StaticConnectionPool",
    "Transport",
    "create_connection_pool",
]
