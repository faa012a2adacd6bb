"""Responses of the root endpoint: node info and ping."""

from pydantic import BaseModel, ConfigDict

from ..transport.call_details import ApiCallDetails
from .base import Response


class ElasticsearchVersionInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    number: str | None = None
    build_flavor: str | None = None
    build_type: str | None = None
    build_hash: str | None = None
    build_timestamp: str | None = None
    build_date: str | None = None
    build_snapshot: bool | None = None
    lucene_version: str | None = None
    minimum_wire_compatibility_version: str | None = None
    minimum_index_compatibility_version: str | None = None


class RootNodeInfoResponse(Response):
    name: str | None = None
    cluster_name: str | None = None
    cluster_uuid: str | None = None
    version: ElasticsearchVersionInfo | None = None
    tagline: str | None = None


class ExistsResponse(Response):
    """Answer of a HEAD request: 200 means the resource exists, 404 that it does not."""

    @classmethod
    def from_call(cls, details: ApiCallDetails) -> "ExistsResponse":
        return cls()

    @property
    def exists(self) -> bool:
        return self.api_call is not None and self.api_call.http_status_code == 200


class PingResponse(Response):
    @classmethod
    def from_call(cls, details: ApiCallDetails) -> "PingResponse":
        return cls()
