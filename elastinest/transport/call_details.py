"""Details of one low level call, attached to every response."""

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .audit import Audit
from .request_data import HttpMethod, RequestData

UNRETRYABLE_SERVER_ERRORS = {502, 503}


class ApiCallDetails(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    http_method: HttpMethod
    uri: str
    path: str
    http_status_code: int | None = None
    response_mime_type: str | None = None
    request_body_in_bytes: bytes | None = None
    response_body_in_bytes: bytes | None = None
    original_exception: BaseException | None = Field(default=None, exclude=True)
    audit_trail: list[Audit] = Field(default_factory=list)
    deprecation_warnings: list[str] = Field(default_factory=list)

    _response_body: bytes | None = PrivateAttr(default=None)

    @classmethod
    def from_request(
        cls,
        request_data: RequestData,
        *,
        status_code: int | None = None,
        response_body: bytes | None = None,
        exception: BaseException | None = None,
        mime_type: str | None = None,
        warnings: list[str] | None = None,
    ) -> "ApiCallDetails":
        """
        Build call details for a request, deciding success from the status
        code and the request's allowed status codes.
        """
        success = (
            exception is None
            and status_code is not None
            and (200 <= status_code < 300 or status_code in request_data.allowed_status_codes)
        )
        keep_bytes = request_data.disable_direct_streaming
        details = cls(
            success=success,
            http_method=request_data.method,
            uri=request_data.uri,
            path=request_data.path,
            http_status_code=status_code,
            response_mime_type=mime_type,
            request_body_in_bytes=request_data.body() if keep_bytes else None,
            response_body_in_bytes=response_body if keep_bytes else None,
            original_exception=exception,
            deprecation_warnings=warnings or [],
        )
        details._response_body = response_body
        return details

    @property
    def response_body(self) -> bytes | None:
        return self._response_body

    @property
    def success_or_known_error(self) -> bool:
        """
        True for successful calls and for errors that retrying on another
        node would not fix (4xx and most 5xx answers).
        """
        if self.success:
            return True
        status = self.http_status_code
        return status is not None and 400 <= status <= 599 and status not in UNRETRYABLE_SERVER_ERRORS

    @property
    def debug_information(self) -> str:
        outcome = "successful" if self.success else "unsuccessful"
        validity = "Valid" if self.success else "Invalid"
        lines = [f"{validity} response built from a {outcome} low level call on {self.http_method.value}: {self.uri}"]

        if self.audit_trail:
            lines.append("# Audit trail of this API call:")
            for number, audit in enumerate(self.audit_trail, start=1):
                lines.append(f" - [{number}] {audit}")
        if self.original_exception is not None:
            lines.append(f"# OriginalException: {type(self.original_exception).__name__}: {self.original_exception}")
        if self.request_body_in_bytes is not None:
            lines.append("# Request:")
            lines.append(self.request_body_in_bytes.decode("utf-8", errors="replace"))
        else:
            lines.append("# Request:")
            lines.append("<Request stream not captured or already read to completion by serializer. Set disable_direct_streaming to force it to be set on the response.>")
        if self.response_body_in_bytes is not None:
            lines.append("# Response:")
            lines.append(self.response_body_in_bytes.decode("utf-8", errors="replace"))
        else:
            lines.append("# Response:")
            lines.append("<Response stream not captured or already read to completion by serializer. Set disable_direct_streaming to force it to be set on the response.>")
        return "\n".join(lines)

    def __str__(self) -> str:
        status = self.http_status_code if self.http_status_code is not None else "n/a"
        return f"{'Successful' if self.success else 'Failed'} low level call on {self.http_method.value}: {self.uri} ({status})"
