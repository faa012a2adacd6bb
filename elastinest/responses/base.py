"""
Response base model and the helper that builds responses from call details.

Every response carries the ApiCallDetails of the call that produced it, so
validity, server errors and the audit trail are available next to the
parsed body.
"""

import json
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from ..exceptions import ResponseDeserializationError
from ..serialization import JsonSerializer
from ..transport.call_details import ApiCallDetails
from ..utils.error_handling import raise_for_api_call
from ..utils.logging import get_logger

logger = get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound="Response")


class ErrorCause(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str | None = None
    reason: str | None = None
    index: str | None = None
    root_cause: list["ErrorCause"] = Field(default_factory=list)
    caused_by: "ErrorCause | None" = None


class ServerError(BaseModel):
    """The error object Elasticsearch sends with failed calls."""

    error: ErrorCause | None = None
    status: int | None = None

    @classmethod
    def from_body(cls, body: bytes | None, status: int | None) -> "ServerError | None":
        if not body:
            return None
        try:
            data = json.loads(body)
        except ValueError:
            return None
        if not isinstance(data, dict) or "error" not in data:
            return None
        error = data["error"]
        if isinstance(error, str):
            error = {"reason": error}
        try:
            return cls(error=error, status=data.get("status", status))
        except ValidationError:
            return None

    def __str__(self) -> str:
        if self.error is None:
            return f"ServerError: {self.status}"
        return f"ServerError: {self.status} Type: {self.error.type} Reason: \"{self.error.reason}\""


class Response(BaseModel):
    model_config = ConfigDict(
        extra="allow",
        validate_by_name=True,
        validate_by_alias=True,
        arbitrary_types_allowed=True,
    )

    _api_call: ApiCallDetails | None = PrivateAttr(default=None)

    @property
    def api_call(self) -> ApiCallDetails | None:
        return self._api_call

    def with_api_call(self: ResponseT, details: ApiCallDetails) -> ResponseT:
        self._api_call = details
        return self

    @property
    def is_valid(self) -> bool:
        """True when the call succeeded or returned a status the request allows."""
        return self._api_call is not None and self._api_call.success

    @property
    def server_error(self) -> ServerError | None:
        if self._api_call is None or self._api_call.success:
            return None
        return ServerError.from_body(self._api_call.response_body, self._api_call.http_status_code)

    @property
    def original_exception(self) -> BaseException | None:
        return self._api_call.original_exception if self._api_call is not None else None

    @property
    def debug_information(self) -> str:
        if self._api_call is None:
            return f"{type(self).__name__} not built from a call"
        info = self._api_call.debug_information
        error = self.server_error
        if error is not None:
            info = f"{info}\n# Server error: {error}"
        return info

    def raise_for_error(self: ResponseT, context: dict[str, Any] | None = None) -> ResponseT:
        """
        Return this response when it is valid, else raise its classified error.

        Raises:
            ElastiNestError: Classified from the status code or original exception
        """
        if self._api_call is None:
            return self
        raise_for_api_call(self._api_call, context)
        return self


def build_response(
    response_type: type[ResponseT],
    details: ApiCallDetails,
    serializer: JsonSerializer,
) -> ResponseT:
    """
    Parse the body of a call into response_type and attach the call details.

    A failed call never raises here: if its body does not fit the model an
    empty response is returned and the error is reachable via server_error.

    Raises:
        ResponseDeserializationError: If a successful call returned a body
            that does not fit the model
    """
    build = getattr(response_type, "from_call", None)
    if build is not None:
        return build(details).with_api_call(details)

    try:
        response = serializer.deserialize(response_type, details.response_body)
    except ResponseDeserializationError:
        if details.success:
            raise
        logger.debug(
            "Failed call body does not fit the response model",
            extra={"response_type": response_type.__name__, "status": details.http_status_code},
        )
        response = response_type.model_construct()
    return response.with_api_call(details)
