"""Everything the connection needs to perform one HTTP request."""

from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from ..exceptions import PipelineFailure
from ..utils.logging import get_correlation_id
from .audit import AuditEvent
from .node import Node

if TYPE_CHECKING:
    from ..serialization.post_data import PostData
    from ..settings import TransportSettings

MIME_TYPE = "application/json"
OPAQUE_ID_HEADER = "X-Opaque-Id"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"


class RequestConfiguration(BaseModel):
    """Per-request overrides of the connection settings."""

    request_timeout: timedelta | None = None
    ping_timeout: timedelta | None = None
    allowed_status_codes: list[int] = Field(default_factory=list)
    disable_sniff: bool | None = None
    disable_ping: bool | None = None
    max_retries: int | None = Field(default=None, ge=0)
    force_node: str | None = None
    opaque_id: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)


class RequestData:
    def __init__(
        self,
        method: HttpMethod | str,
        path: str,
        post_data: "PostData | None",
        settings: "TransportSettings",
        configuration: RequestConfiguration | None = None,
    ):
        configuration = configuration or RequestConfiguration()
        self.method = HttpMethod(method)
        self.path = path if path.startswith("/") else f"/{path}"
        self.post_data = post_data
        self.settings = settings
        self.configuration = configuration

        self.request_timeout: timedelta = configuration.request_timeout or settings.request_timeout
        self.ping_timeout: timedelta = configuration.ping_timeout or settings.ping_timeout
        self.allowed_status_codes = set(configuration.allowed_status_codes)
        if self.method == HttpMethod.HEAD:
            self.allowed_status_codes.add(404)

        self.headers: dict[str, str] = {
            "accept": MIME_TYPE,
            **settings.auth_headers(),
            **settings.headers,
            **configuration.headers,
        }
        if post_data is not None:
            self.headers.setdefault("content-type", MIME_TYPE)
        opaque_id = configuration.opaque_id or get_correlation_id()
        if opaque_id:
            self.headers[OPAQUE_ID_HEADER] = opaque_id

        self.node: Node | None = None
        self.made_it_to_response = False
        self._body: bytes | None = None
        self._body_written = False

    @classmethod
    def for_ping(cls, node: Node, settings: "TransportSettings", configuration: RequestConfiguration | None = None) -> "RequestData":
        ping_timeout = (configuration.ping_timeout if configuration else None) or settings.ping_timeout
        data = cls(
            HttpMethod.HEAD, "/", None, settings,
            RequestConfiguration(request_timeout=ping_timeout, ping_timeout=ping_timeout),
        )
        data.node = node
        return data

    @classmethod
    def for_sniff(cls, node: Node, settings: "TransportSettings") -> "RequestData":
        timeout_ms = int(settings.ping_timeout.total_seconds() * 1000)
        data = cls(
            HttpMethod.GET, f"/_nodes/http,settings?flat_settings&timeout={timeout_ms}ms", None, settings,
            RequestConfiguration(request_timeout=settings.ping_timeout),
        )
        data.node = node
        return data

    @property
    def uri(self) -> str:
        if self.node is None:
            return self.path
        return f"{self.node.uri}{self.path}"

    @property
    def disable_direct_streaming(self) -> bool:
        return self.settings.disable_direct_streaming

    @property
    def on_failure_audit_event(self) -> AuditEvent:
        return AuditEvent.BAD_RESPONSE if self.made_it_to_response else AuditEvent.BAD_REQUEST

    @property
    def on_failure_pipeline_failure(self) -> PipelineFailure:
        return PipelineFailure.BAD_RESPONSE if self.made_it_to_response else PipelineFailure.BAD_REQUEST

    def body(self) -> bytes | None:
        """Serialized request body, written once and reused across retries."""
        if not self._body_written:
            self._body = self.post_data.write(self.settings) if self.post_data is not None else None
            self._body_written = True
        return self._body

    def __repr__(self) -> str:
        return f"RequestData({self.method.value} {self.uri})"
