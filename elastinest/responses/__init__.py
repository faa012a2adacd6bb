"""Response models."""

from .base import ErrorCause, Response, ServerError, build_response
from .cluster import ElasticsearchVersionInfo, ExistsResponse, PingResponse, RootNodeInfoResponse
from .documents import (
    BulkResponse,
    BulkResponseItem,
    IndexResponse,
    MultiTermVectorsResponse,
    TermVectorsResult,
)
from .low_level import BytesResponse, DynamicResponse
from .search import (
    CountResponse,
    ExplainResponse,
    ExplanationDetail,
    Hit,
    HitsMetadata,
    SearchResponse,
    ShardStatistics,
    TotalHits,
)
from .templates import AcknowledgedResponse, GetIndexTemplateResponse, IndexSettings, TemplateMapping

__all__ = [
    "AcknowledgedResponse",
    "BulkResponse",
    "BulkResponseItem",
    "BytesResponse",
    "CountResponse",
    "DynamicResponse",
    "ElasticsearchVersionInfo",
    "ErrorCause",
    "ExistsResponse",
    "ExplainResponse",
    "ExplanationDetail",
    "GetIndexTemplateResponse",
    "Hit",
    "HitsMetadata",
    "IndexResponse",
    "IndexSettings",
    "MultiTermVectorsResponse",
    "PingResponse",
    "Response",
    "RootNodeInfoResponse",
    "SearchResponse",
    "ServerError",
    "ShardStatistics",
    "TemplateMapping",
    "TermVectorsResult",
    "TotalHits",
    "build_response",
]
