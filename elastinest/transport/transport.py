"""
Transport: drives a RequestPipeline over a connection pool for each call.
"""

from ..exceptions import (
    ElasticsearchClientError,
    PipelineError,
    UnexpectedElasticsearchClientError,
)
from ..settings import TransportSettings
from ..utils.logging import get_logger, log_api_call
from .call_details import ApiCallDetails
from .connection import Connection, HttpConnection
from .connection_pool import ConnectionPool, create_connection_pool
from .date_time_provider import DateTimeProvider
from .node import Node
from .pipeline import RequestPipeline
from .request_data import HttpMethod, RequestConfiguration, RequestData

logger = get_logger(__name__)


class Transport:
    """
    Sends requests to Elasticsearch with failover.

    Every call gets its own RequestPipeline. Nodes are tried in the order the
    connection pool hands them out until one gives a successful or known
    error response, retries run out, or the retry timeout passes.
    """

    def __init__(
        self,
        settings: TransportSettings,
        connection: Connection | None = None,
        connection_pool: ConnectionPool | None = None,
        date_time_provider: DateTimeProvider | None = None,
    ):
        settings.ensure_valid()
        self.settings = settings
        self.date_time_provider = date_time_provider or (
            connection_pool.date_time_provider if connection_pool is not None else DateTimeProvider()
        )
        self.connection_pool = connection_pool or create_connection_pool(settings, self.date_time_provider)
        self.connection = connection or HttpConnection(settings)

    def _pipeline(self, configuration: RequestConfiguration | None) -> RequestPipeline:
        return RequestPipeline(
            self.settings,
            self.date_time_provider,
            self.connection_pool,
            self.connection,
            configuration,
        )

    async def request(
        self,
        method: HttpMethod | str,
        path: str,
        post_data=None,
        configuration: RequestConfiguration | None = None,
    ) -> ApiCallDetails:
        """
        Perform a request and return the details of the final attempt.

        Raises:
            ElasticsearchClientError: When the call failed and throw_exceptions
                is set, or when no node was attempted at all
            UnexpectedElasticsearchClientError: When something other than a
                pipeline failure broke the call
        """
        pipeline = self._pipeline(configuration)
        seen: list[PipelineError] = []

        try:
            await pipeline.first_pool_usage()
        except PipelineError as e:
            logger.warning(
                "Sniff on startup failed, continuing with the seed nodes",
                extra={"failure_reason": e.failure_reason.value, "error": str(e)},
            )
            seen.append(e)

        request_data = RequestData(method, path, post_data, self.settings, configuration)
        details: ApiCallDetails | None = None

        for node in pipeline.next_node():
            request_data.node = node
            request_data.made_it_to_response = False
            try:
                await pipeline.sniff_on_stale_cluster()
                await pipeline.ping(node)
                details = await pipeline.call_elasticsearch(request_data)
                if not details.success_or_known_error:
                    pipeline.mark_dead(node)
                    await pipeline.sniff_on_connection_failure()
            except PipelineError as e:
                details = self._handle_pipeline_error(details, e, pipeline, node, seen)
                if not e.recoverable:
                    break
                continue
            except Exception as e:
                raise UnexpectedElasticsearchClientError(
                    str(e),
                    original_error=e,
                    api_call=details,
                    audit_trail=pipeline.audit_trail,
                ) from e

            if details is None or not details.success_or_known_error:
                continue
            pipeline.mark_alive(node)
            break

        return self._finalize(pipeline, request_data, details, seen)

    @staticmethod
    def _handle_pipeline_error(
        details: ApiCallDetails | None,
        error: PipelineError,
        pipeline: RequestPipeline,
        node: Node,
        seen: list[PipelineError],
    ) -> ApiCallDetails | None:
        if details is None:
            details = error.api_call
        pipeline.mark_dead(node)
        seen.append(error)
        return details

    def _finalize(
        self,
        pipeline: RequestPipeline,
        request_data: RequestData,
        details: ApiCallDetails | None,
        seen: list[PipelineError],
    ) -> ApiCallDetails:
        if request_data.node is None:
            raise pipeline.no_nodes_attempted_error(seen)

        if details is None:
            details = next((e.api_call for e in reversed(seen) if e.api_call is not None), None)

        client_error: ElasticsearchClientError | None = pipeline.create_client_error(details, request_data, seen)
        if details is None:
            details = ApiCallDetails.from_request(request_data, exception=client_error)
            if client_error is not None:
                client_error.api_call = details
        details.audit_trail = pipeline.audit_trail
        log_api_call(details)

        if client_error is not None and self.settings.throw_exceptions:
            raise client_error
        if client_error is not None and details.original_exception is None:
            details.original_exception = client_error
        return details

    async def close(self) -> None:
        await self.connection.close()
