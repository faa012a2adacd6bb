"""
Exception hierarchy for elastinest.

Every error raised by the client derives from ElastiNestError and carries a
severity, a category, a context dictionary and an optional recovery hint so
callers and structured logs can act on failures uniformly.
"""

from enum import Enum
from typing import Any


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling priorities."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification and recovery strategies."""

    CONNECTION = "connection"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    QUERY = "query"
    NOT_FOUND = "not_found"
    RESOLUTION = "resolution"
    SERIALIZATION = "serialization"
    CONFIGURATION = "configuration"
    PIPELINE = "pipeline"
    SYSTEM = "system"
    UNKNOWN = "unknown"


class PipelineFailure(Enum):
    """Reasons a request pipeline can give up on a call."""

    BAD_AUTHENTICATION = "BadAuthentication"
    BAD_RESPONSE = "BadResponse"
    PING_FAILURE = "PingFailure"
    SNIFF_FAILURE = "SniffFailure"
    COULD_NOT_START_SNIFF_ON_STARTUP = "CouldNotStartSniffOnStartup"
    MAX_TIMEOUT_REACHED = "MaxTimeoutReached"
    MAX_RETRIES_REACHED = "MaxRetriesReached"
    NO_NODES_ATTEMPTED = "NoNodesAttempted"
    BAD_REQUEST = "BadRequest"
    UNEXPECTED = "Unexpected"


class ElastiNestError(Exception):
    """
    Base exception for all elastinest errors.

    Provides structured error information with severity, category, context
    and recovery hints.
    """

    def __init__(
        self,
        message: str,
        *,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        context: dict[str, Any] | None = None,
        recoverable: bool = False,
        recovery_hint: str | None = None,
        original_error: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.category = category
        self.context = context or {}
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint
        self.original_error = original_error

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "recoverable": self.recoverable,
            "recovery_hint": self.recovery_hint,
            "context": self.context,
            "original_error": str(self.original_error) if self.original_error else None,
        }


class ConfigurationError(ElastiNestError):
    """Raised when connection settings are inconsistent."""

    def __init__(self, message: str, setting: str | None = None, **kwargs: Any) -> None:
        context = {"setting": setting} if setting else {}
        super().__init__(
            message,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.CONFIGURATION,
            recoverable=False,
            recovery_hint="Review the ELASTINEST_* environment variables or settings arguments",
            context=context,
            **kwargs
        )


class IndexNameResolutionError(ElastiNestError):
    """Raised when an index, type or id cannot be resolved to a string."""

    def __init__(self, message: str, type_name: str | None = None, **kwargs: Any) -> None:
        context = {"type": type_name} if type_name else {}
        super().__init__(
            message,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.RESOLUTION,
            recoverable=False,
            recovery_hint="Map the type with default_mapping_for() or set a default index",
            context=context,
            **kwargs
        )


class RouteResolutionError(ElastiNestError):
    """Raised when no URL template matches the supplied route values."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        supplied: list[str] | None = None,
        **kwargs: Any
    ) -> None:
        context: dict[str, Any] = {}
        if endpoint:
            context["endpoint"] = endpoint
        if supplied is not None:
            context["supplied"] = supplied

        super().__init__(
            message,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.VALIDATION,
            recoverable=False,
            recovery_hint="Supply a combination of route values the endpoint accepts",
            context=context,
            **kwargs
        )


class ConditionlessQueryError(ElastiNestError):
    """Raised when a strict query turns out to be conditionless."""

    def __init__(self, message: str, query_kind: str | None = None, **kwargs: Any) -> None:
        context = {"query": query_kind} if query_kind else {}
        super().__init__(
            message,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.QUERY,
            recoverable=False,
            recovery_hint="Provide the values the query needs or drop is_strict",
            context=context,
            **kwargs
        )


class ResponseDeserializationError(ElastiNestError):
    """Raised when a response body cannot be read into its model."""

    def __init__(
        self,
        message: str,
        original_error: BaseException | None = None,
        response_type: str | None = None,
        **kwargs: Any
    ) -> None:
        context = {"response_type": response_type} if response_type else {}
        super().__init__(
            message,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.SERIALIZATION,
            recoverable=False,
            original_error=original_error,
            context=context,
            **kwargs
        )


class ElasticsearchConnectionError(ElastiNestError):
    """Raised when connection to Elasticsearch fails."""

    def __init__(
        self,
        message: str,
        original_error: BaseException | None = None,
        host: str | None = None,
        **kwargs: Any
    ) -> None:
        context = kwargs.pop('context', {})
        if host:
            context["host"] = host

        super().__init__(
            message,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.CONNECTION,
            recoverable=True,
            recovery_hint="Check Elasticsearch connectivity and retry",
            original_error=original_error,
            context=context,
            **kwargs
        )


class ElasticsearchAuthenticationError(ElastiNestError):
    """Raised when Elasticsearch rejects the credentials (401)."""

    def __init__(
        self,
        message: str,
        original_error: BaseException | None = None,
        auth_method: str | None = None,
        **kwargs: Any
    ) -> None:
        context = {"auth_method": auth_method} if auth_method else {}
        super().__init__(
            message,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.AUTHENTICATION,
            recoverable=False,
            recovery_hint="Verify API key or credentials",
            original_error=original_error,
            context=context,
            **kwargs
        )


class ElasticsearchAuthorizationError(ElastiNestError):
    """Raised when the user lacks privileges (403)."""

    def __init__(
        self,
        message: str,
        original_error: BaseException | None = None,
        required_privilege: str | None = None,
        **kwargs: Any
    ) -> None:
        context = {"required_privilege": required_privilege} if required_privilege else {}
        super().__init__(
            message,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.AUTHORIZATION,
            recoverable=False,
            recovery_hint="Check user permissions and privileges",
            original_error=original_error,
            context=context,
            **kwargs
        )


class ElasticsearchSSLError(ElastiNestError):
    """Raised when the TLS handshake with a node fails."""

    def __init__(
        self,
        message: str,
        original_error: BaseException | None = None,
        **kwargs: Any
    ) -> None:
        super().__init__(
            message,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.CONNECTION,
            recoverable=False,
            recovery_hint="Check SSL certificates and configuration",
            original_error=original_error,
            **kwargs
        )


class ElasticsearchTimeoutError(ElastiNestError):
    """Raised when a request or ping exceeds its timeout."""

    def __init__(
        self,
        message: str,
        original_error: BaseException | None = None,
        operation: str | None = None,
        timeout_seconds: float | None = None,
        **kwargs: Any
    ) -> None:
        context = {
            "operation": operation,
            "timeout_seconds": timeout_seconds,
        }
        context = {k: v for k, v in context.items() if v is not None}

        super().__init__(
            message,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.TIMEOUT,
            recoverable=True,
            recovery_hint="Increase request_timeout or optimize the request",
            original_error=original_error,
            context=context,
            **kwargs
        )


class ElasticsearchRateLimitError(ElastiNestError):
    """Raised when Elasticsearch answers 429."""

    def __init__(
        self,
        message: str,
        original_error: BaseException | None = None,
        retry_after: int | None = None,
        **kwargs: Any
    ) -> None:
        context = {"retry_after_seconds": retry_after} if retry_after else {}
        super().__init__(
            message,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.RATE_LIMIT,
            recoverable=True,
            recovery_hint=f"Wait {retry_after} seconds before retrying" if retry_after else "Reduce request rate",
            original_error=original_error,
            context=context,
            **kwargs
        )


class ElasticsearchQueryError(ElastiNestError):
    """Raised when Elasticsearch rejects a request body (400)."""

    def __init__(
        self,
        message: str,
        original_error: BaseException | None = None,
        query: dict[str, Any] | None = None,
        index: str | None = None,
        **kwargs: Any
    ) -> None:
        context = kwargs.pop('context', {})
        if query:
            context["query"] = query
        if index:
            context["index"] = index

        super().__init__(
            message,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.QUERY,
            recoverable=False,
            recovery_hint="Review query syntax and parameters",
            original_error=original_error,
            context=context,
            **kwargs
        )


class ElasticsearchNotFoundError(ElastiNestError):
    """Raised when the addressed index, template or document does not exist."""

    def __init__(
        self,
        message: str,
        original_error: BaseException | None = None,
        path: str | None = None,
        **kwargs: Any
    ) -> None:
        context = {"path": path} if path else {}
        super().__init__(
            message,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.NOT_FOUND,
            recoverable=False,
            recovery_hint="Check that the index or resource exists",
            original_error=original_error,
            context=context,
            **kwargs
        )


class ElasticsearchClientError(ElastiNestError):
    """
    Raised by the transport when a call failed and throw_exceptions is set.

    Carries the pipeline failure reason, the ApiCallDetails of the failed call
    and its audit trail.
    """

    def __init__(
        self,
        message: str,
        failure_reason: PipelineFailure | None = None,
        api_call: Any | None = None,
        audit_trail: list[Any] | None = None,
        original_error: BaseException | None = None,
        **kwargs: Any
    ) -> None:
        context: dict[str, Any] = {}
        if failure_reason is not None:
            context["failure_reason"] = failure_reason.value
        if api_call is not None:
            context["http_status"] = getattr(api_call, "http_status_code", None)
            context["uri"] = getattr(api_call, "uri", None)

        recoverable = failure_reason in {
            PipelineFailure.MAX_RETRIES_REACHED,
            PipelineFailure.MAX_TIMEOUT_REACHED,
            PipelineFailure.PING_FAILURE,
            PipelineFailure.SNIFF_FAILURE,
        }
        super().__init__(
            message,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.PIPELINE,
            recoverable=recoverable,
            recovery_hint="Inspect debug_information for the audit trail",
            original_error=original_error,
            context=context,
            **kwargs
        )
        self.failure_reason = failure_reason
        self.api_call = api_call
        self.audit_trail = audit_trail or []

    @property
    def debug_information(self) -> str:
        if self.api_call is not None:
            return self.api_call.debug_information
        return self.message


class UnexpectedElasticsearchClientError(ElasticsearchClientError):
    """Raised when something other than a connection fault broke the call."""

    def __init__(self, message: str, original_error: BaseException | None = None, **kwargs: Any) -> None:
        super().__init__(
            message,
            failure_reason=PipelineFailure.UNEXPECTED,
            original_error=original_error,
            **kwargs
        )
        self.severity = ErrorSeverity.CRITICAL
        self.category = ErrorCategory.SYSTEM


class PipelineError(ElastiNestError):
    """
    Raised inside the request pipeline when a step fails.

    Only BadResponse and PingFailure are recoverable: the pipeline moves on to
    the next node. Any other reason ends the call.
    """

    def __init__(
        self,
        failure_reason: PipelineFailure,
        original_error: BaseException | None = None,
        api_call: Any | None = None,
        **kwargs: Any
    ) -> None:
        message = f"Pipeline failure: {failure_reason.value}"
        if original_error is not None:
            message = f"{message}: {original_error}"
        super().__init__(
            message,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.PIPELINE,
            recoverable=failure_reason in {PipelineFailure.BAD_RESPONSE, PipelineFailure.PING_FAILURE},
            original_error=original_error,
            context={"failure_reason": failure_reason.value},
            **kwargs
        )
        self.failure_reason = failure_reason
        self.api_call = api_call
