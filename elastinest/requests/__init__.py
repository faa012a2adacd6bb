"""API requests, each as an initializer model plus a fluent descriptor."""

from .base import (
    ApiRequest,
    DocumentRequestDescriptor,
    Endpoint,
    PathParam,
    QueryParam,
    RequestDescriptor,
    Route,
    encode_query,
)
from .cluster import PingDescriptor, PingRequest, RootNodeInfoDescriptor, RootNodeInfoRequest
from .documents import (
    BulkCreateOperation,
    BulkDeleteOperation,
    BulkDescriptor,
    BulkIndexOperation,
    BulkOperation,
    BulkRequest,
    IndexDescriptor,
    IndexRequest,
    MultiTermVectorOperation,
    MultiTermVectorsDescriptor,
    MultiTermVectorsRequest,
)
from .search import (
    CountDescriptor,
    CountRequest,
    ExplainDescriptor,
    ExplainRequest,
    SearchDescriptor,
    SearchRequest,
)
from .templates import (
    DeleteIndexTemplateDescriptor,
    DeleteIndexTemplateRequest,
    GetIndexTemplateDescriptor,
    GetIndexTemplateRequest,
    IndexSettingsDescriptor,
    IndexTemplateExistsDescriptor,
    IndexTemplateExistsRequest,
    PutIndexTemplateDescriptor,
    PutIndexTemplateRequest,
)

__all__ = [
    "ApiRequest",
    "BulkCreateOperation",
    "BulkDeleteOperation",
    "BulkDescriptor",
    "BulkIndexOperation",
    "BulkOperation",
    "BulkRequest",
    "CountDescriptor",
    "CountRequest",
    "DeleteIndexTemplateDescriptor",
    "DeleteIndexTemplateRequest",
    "DocumentRequestDescriptor",
    "Endpoint",
    "ExplainDescriptor",
    "ExplainRequest",
    "GetIndexTemplateDescriptor",
    "GetIndexTemplateRequest",
    "IndexDescriptor",
    "IndexRequest",
    "IndexSettingsDescriptor",
    "IndexTemplateExistsDescriptor",
    "IndexTemplateExistsRequest",
    "MultiTermVectorOperation",
    "MultiTermVectorsDescriptor",
    "MultiTermVectorsRequest",
    "PathParam",
    "PingDescriptor",
    "PingRequest",
    "PutIndexTemplateDescriptor",
    "PutIndexTemplateRequest",
    "QueryParam",
    "RequestDescriptor",
    "RootNodeInfoDescriptor",
    "RootNodeInfoRequest",
    "Route",
    "SearchDescriptor",
    "SearchRequest",
    "encode_query",
]
