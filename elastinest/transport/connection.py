"""
Connections perform a single HTTP request against the node set on the
request data. Connection level failures are reported on the returned
ApiCallDetails, never raised, so the pipeline can decide whether to retry.
"""

from abc import ABC, abstractmethod

from elastic_transport import (
    AiohttpHttpNode,
    ConnectionError as TransportConnectionError,
    ConnectionTimeout,
    HttpHeaders,
    NodeConfig,
)

from ..utils.logging import get_logger
from .call_details import ApiCallDetails
from .request_data import MIME_TYPE, RequestData

logger = get_logger(__name__)


class Connection(ABC):
    @abstractmethod
    async def request(self, request_data: RequestData) -> ApiCallDetails:
        """Send request_data to request_data.node."""

    async def close(self) -> None:
        return None


class HttpConnection(Connection):
    """HTTP connection backed by one elastic_transport aiohttp node per address."""

    def __init__(self, settings):
        self._settings = settings
        self._nodes: dict[str, AiohttpHttpNode] = {}

    def _http_node(self, request_data: RequestData) -> AiohttpHttpNode:
        node = request_data.node
        http_node = self._nodes.get(node.uri)
        if http_node is None:
            config = NodeConfig(
                scheme=node.scheme,
                host=node.host,
                port=node.port,
                request_timeout=self._settings.request_timeout.total_seconds(),
                verify_certs=self._settings.verify_certs,
            )
            http_node = AiohttpHttpNode(config)
            self._nodes[node.uri] = http_node
        return http_node

    async def request(self, request_data: RequestData) -> ApiCallDetails:
        if request_data.node is None:
            raise ValueError("Request data has no node to send the request to")

        http_node = self._http_node(request_data)
        try:
            meta, body = await http_node.perform_request(
                request_data.method.value,
                request_data.path,
                body=request_data.body(),
                headers=HttpHeaders(request_data.headers),
                request_timeout=request_data.request_timeout.total_seconds(),
            )
        except (TransportConnectionError, ConnectionTimeout) as e:
            logger.debug(
                "Connection failure",
                extra={"uri": request_data.uri, "error": str(e)},
            )
            return ApiCallDetails.from_request(request_data, exception=e)

        request_data.made_it_to_response = True
        warnings = [w for w in meta.headers.get("warning", "").split(",") if w.strip()] if meta.headers else []
        return ApiCallDetails.from_request(
            request_data,
            status_code=meta.status,
            response_body=body,
            mime_type=meta.headers.get("content-type") if meta.headers else None,
            warnings=warnings,
        )

    async def close(self) -> None:
        for http_node in self._nodes.values():
            await http_node.close()
        self._nodes.clear()


class InMemoryConnection(Connection):
    """
    Answers every request with the same canned response and records the
    requests it received.
    """

    def __init__(
        self,
        response_body: bytes | None = None,
        status_code: int = 200,
        exception: BaseException | None = None,
        content_type: str = MIME_TYPE,
    ):
        self.response_body = response_body
        self.status_code = status_code
        self.exception = exception
        self.content_type = content_type
        self.requests: list[RequestData] = []

    @property
    def last_request(self) -> RequestData | None:
        return self.requests[-1] if self.requests else None

    async def request(self, request_data: RequestData) -> ApiCallDetails:
        self.requests.append(request_data)
        request_data.body()
        if self.exception is not None:
            return ApiCallDetails.from_request(request_data, exception=self.exception)

        request_data.made_it_to_response = True
        return ApiCallDetails.from_request(
            request_data,
            status_code=self.status_code,
            response_body=self.response_body,
            mime_type=self.content_type,
        )
