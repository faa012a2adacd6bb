"""
elastinest - a typed Elasticsearch client.

Requests can be written as initializers or as fluent descriptors, index and
type names are inferred from document classes, and the transport fails
over, pings and sniffs across the nodes of a cluster.
"""

__version__ = "0.1.0"

from .client import ElasticClient, LowLevelClient, create_client
from .exceptions import (
    ConditionlessQueryError,
    ConfigurationError,
    ElasticsearchClientError,
    ElastiNestError,
    IndexNameResolutionError,
    PipelineFailure,
    ResponseDeserializationError,
    RouteResolutionError,
    UnexpectedElasticsearchClientError,
)
from .infer import Field, Id, IndexName, Indices, JoinField, RelationName, TypeName, Types
from .settings import ConnectionPoolKind, ConnectionSettings, TransportSettings

__all__ = [
    "ConditionlessQueryError",
    "ConfigurationError",
    "ConnectionPoolKind",
    "ConnectionSettings",
    "ElasticClient",
    "ElasticsearchClientError",
    "ElastiNestError",
    "Field",
    "Id",
    "IndexName",
    "IndexNameResolutionError",
    "Indices",
    "JoinField",
    "LowLevelClient",
    "PipelineFailure",
    "RelationName",
    "ResponseDeserializationError",
    "RouteResolutionError",
    "TransportSettings",
    "TypeName",
    "Types",
    "UnexpectedElasticsearchClientError",
    "__version__",
    "create_client",
]
