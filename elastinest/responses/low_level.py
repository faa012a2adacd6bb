"""Untyped responses for the low level client."""

import json
from typing import Any

from pydantic import PrivateAttr

from ..transport.call_details import ApiCallDetails
from .base import Response


class BytesResponse(Response):
    """The raw response body."""

    @classmethod
    def from_call(cls, details: ApiCallDetails) -> "BytesResponse":
        return cls()

    @property
    def body(self) -> bytes:
        if self.api_call is None:
            return b""
        return self.api_call.response_body or b""


class DynamicResponse(Response):
    """The response body parsed into plain Python values."""

    _body: Any = PrivateAttr(default=None)

    @classmethod
    def from_call(cls, details: ApiCallDetails) -> "DynamicResponse":
        response = cls()
        if details.response_body:
            try:
                response._body = json.loads(details.response_body)
            except ValueError:
                response._body = None
        return response

    @property
    def body(self) -> Any:
        return self._body

    def get(self, path: str, default: Any = None) -> Any:
        """Read a dotted path, e.g. get("version.number")."""
        value = self.body
        for part in path.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            elif isinstance(value, list) and part.isdigit() and int(part) < len(value):
                value = value[int(part)]
            else:
                return default
        return value
