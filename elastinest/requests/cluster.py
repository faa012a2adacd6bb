"""Requests against the root endpoint."""

from ..responses import PingResponse, RootNodeInfoResponse
from ..transport.request_data import HttpMethod
from .base import ApiRequest, Endpoint, RequestDescriptor


class RootNodeInfoRequest(ApiRequest):
    endpoint = Endpoint("root_node_info", HttpMethod.GET, ["/"])
    response_type = RootNodeInfoResponse


class RootNodeInfoDescriptor(RequestDescriptor[RootNodeInfoRequest]):
    request_class = RootNodeInfoRequest


class PingRequest(ApiRequest):
    endpoint = Endpoint("ping", HttpMethod.HEAD, ["/"])
    response_type = PingResponse


class PingDescriptor(RequestDescriptor[PingRequest]):
    request_class = PingRequest
