"""
The typed Elasticsearch client.

Every API method takes either a request instance (the initializer syntax),
a selector that configures a fresh descriptor (the fluent syntax), or
nothing at all. Both syntaxes end up as the same request model, so they
produce the same method, URL and body.
"""

from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from typing import Any

from .requests import (
    ApiRequest,
    BulkDescriptor,
    CountDescriptor,
    DeleteIndexTemplateDescriptor,
    ExplainDescriptor,
    GetIndexTemplateDescriptor,
    IndexDescriptor,
    IndexTemplateExistsDescriptor,
    MultiTermVectorsDescriptor,
    PingDescriptor,
    PutIndexTemplateDescriptor,
    RequestDescriptor,
    RootNodeInfoDescriptor,
    SearchDescriptor,
    encode_query,
)
from .responses import (
    AcknowledgedResponse,
    BulkResponse,
    BytesResponse,
    CountResponse,
    DynamicResponse,
    ExistsResponse,
    ExplainResponse,
    GetIndexTemplateResponse,
    IndexResponse,
    MultiTermVectorsResponse,
    PingResponse,
    Response,
    RootNodeInfoResponse,
    SearchResponse,
    build_response,
)
from .serialization import JsonSerializer, PostData
from .settings import ConnectionSettings
from .transport import (
    Connection,
    ConnectionPool,
    DateTimeProvider,
    HttpMethod,
    RequestConfiguration,
    Transport,
)
from .utils.logging import get_logger

logger = get_logger(__name__)


def build_request(
    request: ApiRequest | Callable[[Any], Any] | None,
    descriptor_class: type[RequestDescriptor],
    **descriptor_args: Any,
) -> ApiRequest:
    """
    Turn what an API method received into a request model.

    A request instance is used as is. A selector is applied to a new
    descriptor; selectors may return the descriptor or mutate it and return
    nothing. A request instance passed in place of a descriptor argument,
    as in `put_index_template(PutIndexTemplateRequest("a"))`, wins over it.
    """
    if isinstance(request, ApiRequest):
        return request
    for value in descriptor_args.values():
        if isinstance(value, ApiRequest):
            return value
    descriptor = descriptor_class(**descriptor_args)
    if request is not None:
        selected = request(descriptor)
        if selected is not None:
            descriptor = selected
    return descriptor.build()


class LowLevelClient:
    """Untyped access to the transport: paths and bodies are passed as given."""

    def __init__(self, transport: Transport, serializer: JsonSerializer):
        self._transport = transport
        self._serializer = serializer

    async def perform_request(
        self,
        method: HttpMethod | str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
        *,
        response_type: type[BytesResponse] | type[DynamicResponse] = DynamicResponse,
        configuration: RequestConfiguration | None = None,
    ) -> BytesResponse | DynamicResponse:
        """
        Send a request and wrap the raw answer.

        Args:
            method: HTTP method
            path: Request path, with or without a leading slash
            body: PostData, bytes, str, or anything JSON serializable
            params: Query string parameters; None values are skipped
            response_type: BytesResponse for the raw body, DynamicResponse
                for parsed JSON

        Returns:
            The response carrying the call details
        """
        if params:
            query = encode_query(params, self._serializer.settings)
            if query:
                path = f"{path}{'&' if '?' in path else '?'}{query}"
        details = await self._transport.request(method, path, self._post_data(body), configuration)
        return build_response(response_type, details, self._serializer)

    @staticmethod
    def _post_data(body: Any) -> PostData | None:
        if body is None or isinstance(body, PostData):
            return body
        if isinstance(body, bytes):
            return PostData.from_bytes(body)
        if isinstance(body, str):
            return PostData.from_string(body)
        return PostData.serializable(body)

    async def bulk(self, post_data: PostData | bytes | str, index: str | None = None) -> DynamicResponse:
        path = f"/{index}/_bulk" if index else "/_bulk"
        return await self.perform_request(HttpMethod.POST, path, post_data)

    async def ping(self) -> BytesResponse:
        return await self.perform_request(HttpMethod.HEAD, "/", response_type=BytesResponse)


class ElasticClient:
    """
    Async client for the Elasticsearch APIs.

    Usage:
        async with ElasticClient(ConnectionSettings(hosts="localhost:9200")) as client:
            response = await client.search(lambda s: s.index("project").size(5), document_type=Project)
    """

    def __init__(
        self,
        settings: ConnectionSettings | None = None,
        connection: Connection | None = None,
        connection_pool: ConnectionPool | None = None,
        date_time_provider: DateTimeProvider | None = None,
    ):
        self.settings = settings or ConnectionSettings()
        self.transport = Transport(self.settings, connection, connection_pool, date_time_provider)
        self.serializer = JsonSerializer(self.settings)
        self.low_level = LowLevelClient(self.transport, self.serializer)

    async def __aenter__(self) -> "ElasticClient":
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    @property
    def connection_pool(self) -> ConnectionPool:
        return self.transport.connection_pool

    async def dispatch(self, request: ApiRequest) -> Response:
        """
        Resolve a request against the settings, send it, and build its response.

        Raises:
            RouteResolutionError: If no URL template takes the request's route values
            IndexNameResolutionError: If an inferred index name cannot be resolved
            ElasticsearchClientError: If the call failed and throw_exceptions is set
        """
        method, path = request.resolve(self.settings)
        post_data = request.post_data(self.settings)
        logger.debug(
            "Dispatching request",
            extra={"request_type": type(request).__name__, "method": method.value, "path": path},
        )
        details = await self.transport.request(method, path, post_data, request.request_configuration)
        return build_response(request.response_model(), details, self.serializer)

    async def root_node_info(self, request: Any = None) -> RootNodeInfoResponse:
        return await self.dispatch(build_request(request, RootNodeInfoDescriptor))

    async def ping(self, request: Any = None) -> PingResponse:
        return await self.dispatch(build_request(request, PingDescriptor))

    async def search(self, request: Any = None, *, document_type: type | None = None) -> SearchResponse:
        return await self.dispatch(build_request(request, SearchDescriptor, document_type=document_type))

    async def count(self, request: Any = None, *, document_type: type | None = None) -> CountResponse:
        return await self.dispatch(build_request(request, CountDescriptor, document_type=document_type))

    async def explain(
        self,
        request: Any = None,
        *,
        document: Any = None,
        document_type: type | None = None,
    ) -> ExplainResponse:
        """
        Explain a document's score.

        client.explain(lambda e: e.query(...), document=project) infers index,
        type and id from the document.
        """
        return await self.dispatch(
            build_request(request, ExplainDescriptor, id=document, document_type=document_type)
        )

    async def multi_term_vectors(self, request: Any = None) -> MultiTermVectorsResponse:
        return await self.dispatch(build_request(request, MultiTermVectorsDescriptor))

    async def get_index_template(self, request: Any = None) -> GetIndexTemplateResponse:
        return await self.dispatch(build_request(request, GetIndexTemplateDescriptor))

    async def put_index_template(self, name: str | None = None, request: Any = None) -> AcknowledgedResponse:
        return await self.dispatch(build_request(request, PutIndexTemplateDescriptor, name=name))

    async def delete_index_template(self, name: str | None = None, request: Any = None) -> AcknowledgedResponse:
        return await self.dispatch(build_request(request, DeleteIndexTemplateDescriptor, name=name))

    async def index_template_exists(self, name: str | None = None, request: Any = None) -> ExistsResponse:
        return await self.dispatch(build_request(request, IndexTemplateExistsDescriptor, name=name))

    async def index_document(self, document: Any = None, request: Any = None) -> IndexResponse:
        return await self.dispatch(build_request(request, IndexDescriptor, document=document))

    async def bulk(self, request: Any = None) -> BulkResponse:
        return await self.dispatch(build_request(request, BulkDescriptor))


@asynccontextmanager
async def create_client(settings: ConnectionSettings | None = None) -> AsyncGenerator[ElasticClient, None]:
    """Create a client and close its connections on exit."""
    client = ElasticClient(settings)
    try:
        yield client
    finally:
        await client.close()
