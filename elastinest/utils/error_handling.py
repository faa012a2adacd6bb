"""
Error classification for elastinest.

Maps failed calls and exceptions raised by the elasticsearch and
elastic_transport libraries onto the structured ElastiNestError hierarchy,
so callers handle a single family of exceptions with consistent context.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from elastic_transport import ConnectionError as TransportConnectionError
from elastic_transport import ConnectionTimeout as TransportConnectionTimeout
from elastic_transport import SerializationError as TransportSerializationError
from elastic_transport import TlsError
from elasticsearch.exceptions import (
    ApiError,
    AuthenticationException,
    AuthorizationException,
    BadRequestError,
    NotFoundError,
)

from ..exceptions import (
    ElasticsearchAuthenticationError,
    ElasticsearchAuthorizationError,
    ElasticsearchConnectionError,
    ElasticsearchNotFoundError,
    ElasticsearchQueryError,
    ElasticsearchRateLimitError,
    ElasticsearchSSLError,
    ElasticsearchTimeoutError,
    ElastiNestError,
    ErrorCategory,
    ErrorSeverity,
    ResponseDeserializationError,
)
from ..utils.logging import get_logger

if TYPE_CHECKING:
    from ..transport.call_details import ApiCallDetails

logger = get_logger(__name__)

RETRYABLE_STATUS_CODES = {502, 503, 504}


class ErrorClassifier:
    """
    Classifies failed calls and library exceptions into structured errors.

    classify_api_call() works from the details of a finished call, which is
    what the transport hands back; classify_elasticsearch_error() works from
    an exception raised by the elasticsearch or elastic_transport libraries.
    """

    @staticmethod
    def classify_api_call(details: "ApiCallDetails", context: dict[str, Any] | None = None) -> ElastiNestError | None:
        """
        Classify a finished call.

        Args:
            details: Call details returned by the transport
            context: Additional context information

        Returns:
            The structured error for a failed call, None for a successful one
        """
        if details.success:
            return None

        context = {"uri": details.uri, "method": details.http_method.value, **(context or {})}
        original = details.original_exception
        status = details.http_status_code

        if status is None:
            if original is not None:
                if isinstance(original, ElastiNestError):
                    return original
                return ErrorClassifier.classify_elasticsearch_error(original, context)
            return ElasticsearchConnectionError(
                f"No response from {details.uri}",
                host=details.uri,
                context=context,
            )
        return ErrorClassifier._classify_status(status, f"{details.http_method.value} {details.path}", original, context)

    @staticmethod
    def _classify_status(
        status: int,
        resource: str,
        original: BaseException | None,
        context: dict[str, Any],
    ) -> ElastiNestError:
        context = {**context, "http_status": status}

        if status == 401:
            return ElasticsearchAuthenticationError(
                f"Authentication failed: {resource}",
                original_error=original,
                auth_method=context.get("auth_method"),
            )
        if status == 403:
            return ElasticsearchAuthorizationError(
                f"Authorization failed: {resource}",
                original_error=original,
                required_privilege=context.get("required_privilege"),
            )
        if status == 404:
            return ElasticsearchNotFoundError(
                f"Resource not found: {resource}",
                original_error=original,
                path=context.get("path") or resource,
            )
        if status == 429:
            return ElasticsearchRateLimitError(
                f"Rate limit exceeded: {resource}",
                original_error=original,
                retry_after=context.get("retry_after"),
            )
        if status == 400:
            return ElasticsearchQueryError(
                f"Invalid request: {resource}",
                original_error=original,
                query=context.get("query"),
                index=context.get("index"),
            )
        if status in RETRYABLE_STATUS_CODES:
            return ElasticsearchConnectionError(
                f"Service temporarily unavailable ({status}): {resource}",
                original_error=original,
                context=context,
            )
        return ElastiNestError(
            f"Unexpected status {status}: {resource}",
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.SYSTEM,
            context=context,
            original_error=original,
        )

    @staticmethod
    def classify_elasticsearch_error(error: Exception, context: dict[str, Any] | None = None) -> ElastiNestError:
        """
        Classify an exception into a structured error.

        Args:
            error: The original exception
            context: Additional context information

        Returns:
            Appropriate ElastiNestError subclass
        """
        context = context or {}

        if isinstance(error, ElastiNestError):
            return error

        # Timeouts first since ConnectionTimeout is a TransportError like ConnectionError
        if isinstance(error, TransportConnectionTimeout):
            return ElasticsearchTimeoutError(
                f"Operation timed out: {str(error)}",
                original_error=error,
                operation=context.get("operation"),
                timeout_seconds=context.get("timeout_seconds"),
            )

        if isinstance(error, TlsError):
            return ElasticsearchSSLError(
                f"SSL connection failed: {str(error)}",
                original_error=error,
            )

        if isinstance(error, TransportConnectionError):
            return ElasticsearchConnectionError(
                f"Connection failed: {str(error)}",
                original_error=error,
                host=context.get("host") or context.get("uri"),
                context=context,
            )

        if isinstance(error, TransportSerializationError):
            return ResponseDeserializationError(
                f"Could not read response: {str(error)}",
                original_error=error,
            )

        if isinstance(error, AuthenticationException):
            return ElasticsearchAuthenticationError(
                f"Authentication failed: {str(error)}",
                original_error=error,
                auth_method=context.get("auth_method"),
            )

        if isinstance(error, AuthorizationException):
            return ElasticsearchAuthorizationError(
                f"Authorization failed: {str(error)}",
                original_error=error,
                required_privilege=context.get("required_privilege"),
            )

        if isinstance(error, NotFoundError):
            return ElasticsearchNotFoundError(
                f"Resource not found: {str(error)}",
                original_error=error,
                path=context.get("path"),
            )

        if isinstance(error, BadRequestError):
            return ElasticsearchQueryError(
                f"Invalid query: {str(error)}",
                original_error=error,
                query=context.get("query"),
                index=context.get("index"),
            )

        if isinstance(error, ApiError):
            return ErrorClassifier._classify_status(error.meta.status, str(error), error, context)

        if isinstance(error, TimeoutError):
            return ElasticsearchTimeoutError(
                f"Operation timed out: {str(error)}",
                original_error=error,
                operation=context.get("operation"),
            )

        return ElastiNestError(
            f"Unexpected error: {str(error)}",
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.SYSTEM,
            context=context,
            original_error=error,
        )


def raise_for_api_call(details: "ApiCallDetails", context: dict[str, Any] | None = None) -> None:
    """
    Raise the structured error for a failed call.

    Calls that got an answer are classified by status code. Calls that never
    got one raise the error the transport attached to them.

    Raises:
        ElastiNestError: The classified error
    """
    if details.success:
        return
    error = ErrorClassifier.classify_api_call(details, context)
    if error is not None:
        logger.warning(
            "API call failed",
            extra={"error": error.to_dict()},
        )
        raise error


def create_error_context(
    operation: str,
    index: str | None = None,
    query: dict[str, Any] | None = None,
    host: str | None = None,
    **additional_context: Any
) -> dict[str, Any]:
    """
    Create standardized error context for consistent logging.

    Args:
        operation: The operation being performed
        index: Elasticsearch index name
        query: Query being executed
        host: Elasticsearch host
        **additional_context: Additional context fields

    Returns:
        Standardized context dictionary
    """
    context = {
        "operation": operation,
        "timestamp": datetime.now(UTC).isoformat(),
    }

    if index:
        context["index"] = index
    if query:
        context["query"] = dict(query)
    if host:
        context["host"] = host

    context.update(additional_context)
    return context
