"""
The request pipeline: the per-call state machine that sniffs, pings,
fails over and keeps the audit trail.
"""

import asyncio
import sys
from collections.abc import Iterator
from contextlib import contextmanager

from ..exceptions import ElasticsearchClientError, PipelineError, PipelineFailure
from ..settings import TransportSettings
from ..utils.logging import get_logger, log_audit_event
from .audit import Audit, AuditEvent
from .call_details import ApiCallDetails
from .connection import Connection
from .connection_pool import ConnectionPool
from .date_time_provider import DateTimeProvider
from .node import Node
from .request_data import RequestConfiguration, RequestData
from .sniff import parse_sniff_response

logger = get_logger(__name__)

# Fraction of the retry timeout after which no new attempt is started
RETRY_TIMEOUT_MARGIN = 0.98
MAX_VIEW_REFRESHES = 100


def _aggregate(errors: list[BaseException]) -> BaseException | None:
    if not errors:
        return None
    if len(errors) == 1:
        return errors[0]
    return ExceptionGroup("Multiple failures while executing the request", [e for e in errors if isinstance(e, Exception)])


class RequestPipeline:
    def __init__(
        self,
        settings: TransportSettings,
        date_time_provider: DateTimeProvider,
        connection_pool: ConnectionPool,
        connection: Connection,
        configuration: RequestConfiguration | None = None,
    ):
        self._settings = settings
        self._date_time_provider = date_time_provider
        self._pool = connection_pool
        self._connection = connection
        self._configuration = configuration or RequestConfiguration()

        self.started_on = date_time_provider.now()
        self.audit_trail: list[Audit] = []
        self.retried = 0
        self.refresh = False

    @property
    def request_timeout(self):
        return self._configuration.request_timeout or self._settings.request_timeout

    @property
    def max_retries(self) -> int:
        if self._configuration.force_node:
            return 0
        configured = self._configuration.max_retries
        if configured is None:
            configured = self._settings.max_retries
        if configured is None:
            return self._pool.max_retries
        return min(configured, self._pool.max_retries)

    @property
    def _sniff_disabled(self) -> bool:
        return bool(self._configuration.disable_sniff) or not self._pool.supports_reseeding

    @property
    def first_pool_usage_needs_sniffing(self) -> bool:
        return not self._sniff_disabled and self._settings.sniff_on_startup and not self._pool.sniffed_on_startup

    @property
    def sniffs_on_connection_failure(self) -> bool:
        return not self._sniff_disabled and self._settings.sniff_on_connection_fault

    @property
    def stale_cluster_state(self) -> bool:
        lifespan = self._settings.sniff_lifespan
        if self._sniff_disabled or lifespan is None:
            return False
        return self._pool.last_update + lifespan < self._date_time_provider.now()

    @property
    def is_taking_too_long(self) -> bool:
        timeout = self._settings.max_retry_timeout or self.request_timeout
        elapsed = self._date_time_provider.now() - self.started_on
        return elapsed >= timeout * RETRY_TIMEOUT_MARGIN

    @property
    def depleted_retries(self) -> bool:
        return self.retried >= self.max_retries + 1 or self.is_taking_too_long

    def _ping_disabled(self, node: Node) -> bool:
        return (
            bool(self._configuration.disable_ping)
            or self._settings.disable_pings
            or not self._pool.supports_pinging
            or not node.is_resurrected
        )

    def add_audit(self, event: AuditEvent, node: Node | None = None) -> Audit:
        now = self._date_time_provider.now()
        audit = Audit(event=event, started=now, ended=now, node=node)
        self.audit_trail.append(audit)
        log_audit_event(audit)
        return audit

    @contextmanager
    def audit(self, event: AuditEvent, node: Node | None = None) -> Iterator[Audit]:
        audit = Audit(event=event, started=self._date_time_provider.now(), node=node)
        self.audit_trail.append(audit)
        try:
            yield audit
        finally:
            audit.ended = self._date_time_provider.now()
            log_audit_event(audit)

    def next_node(self) -> Iterator[Node]:
        """
        Yield nodes to attempt until one succeeds or retries are depleted.

        A successful sniff during the call sets refresh, which abandons the
        current view and starts a new one over the reseeded nodes.
        """
        if self._configuration.force_node:
            yield Node(self._configuration.force_node)
            return

        for _ in range(MAX_VIEW_REFRESHES):
            if self.depleted_retries:
                return
            refreshed = False
            for node in self._pool.create_view(self.add_audit):
                if self.depleted_retries:
                    break
                yield node
                if not self.refresh:
                    continue
                self.refresh = False
                refreshed = True
                break
            if not refreshed:
                return

    def mark_dead(self, node: Node) -> None:
        until = self._date_time_provider.dead_time(
            node.failed_attempts, self._settings.dead_timeout, self._settings.max_dead_timeout
        )
        node.mark_dead(until)
        self.retried += 1

    def mark_alive(self, node: Node) -> None:
        node.mark_alive()

    @staticmethod
    def _throw_bad_authentication_when_needed(details: ApiCallDetails) -> None:
        if details.http_status_code == 401:
            raise PipelineError(PipelineFailure.BAD_AUTHENTICATION, details.original_exception, api_call=details)

    async def first_pool_usage(self) -> None:
        """Sniff once before the very first call when sniff_on_startup is set."""
        if not self.first_pool_usage_needs_sniffing:
            return

        lock = self._pool.bootstrap_lock
        try:
            await asyncio.wait_for(lock.acquire(), timeout=self.request_timeout.total_seconds())
        except asyncio.TimeoutError:
            if self.first_pool_usage_needs_sniffing:
                raise PipelineError(PipelineFailure.COULD_NOT_START_SNIFF_ON_STARTUP)
            return

        try:
            if not self.first_pool_usage_needs_sniffing:
                return
            with self.audit(AuditEvent.SNIFF_ON_STARTUP):
                await self.sniff()
        finally:
            self._pool.sniffed_on_startup = True
            lock.release()

    async def sniff_on_stale_cluster(self) -> None:
        if not self.stale_cluster_state:
            return
        with self.audit(AuditEvent.SNIFF_ON_STALE_CLUSTER):
            await self.sniff()
            self._pool.sniffed_on_startup = True

    async def sniff_on_connection_failure(self) -> None:
        if not self.sniffs_on_connection_failure:
            return
        with self.audit(AuditEvent.SNIFF_ON_FAIL):
            await self.sniff()

    async def sniff(self) -> None:
        """
        Ask the cluster for its nodes and reseed the pool.

        Master eligible nodes are asked first. The first node that answers
        wins.

        Raises:
            PipelineError: SniffFailure when no node could be sniffed
        """
        errors: list[BaseException] = []
        scheme = "https" if self._pool.using_ssl else "http"
        nodes = sorted(
            self._pool.create_view(),
            key=lambda n: n.port if n.master_eligible else sys.maxsize,
        )
        for node in nodes:
            request_data = RequestData.for_sniff(node, self._settings)
            with self.audit(AuditEvent.SNIFF_SUCCESS, node) as audit:
                try:
                    details = await self._connection.request(request_data)
                    self._throw_bad_authentication_when_needed(details)
                    if not details.success:
                        raise PipelineError(
                            request_data.on_failure_pipeline_failure,
                            details.original_exception,
                            api_call=details,
                        )
                    self._pool.reseed(parse_sniff_response(details.response_body or b"{}", scheme))
                    self.refresh = True
                    return
                except Exception as e:
                    audit.event = AuditEvent.SNIFF_FAILURE
                    audit.exception = e
                    errors.append(e)

        raise PipelineError(PipelineFailure.SNIFF_FAILURE, _aggregate(errors))

    async def ping(self, node: Node) -> None:
        """
        Ping a resurrected node before sending it the actual request.

        Raises:
            PipelineError: PingFailure when the node does not answer
        """
        if self._ping_disabled(node):
            return

        request_data = RequestData.for_ping(node, self._settings, self._configuration)
        with self.audit(AuditEvent.PING_SUCCESS, node) as audit:
            try:
                details = await self._connection.request(request_data)
                self._throw_bad_authentication_when_needed(details)
                if not details.success:
                    raise PipelineError(
                        PipelineFailure.PING_FAILURE, details.original_exception, api_call=details
                    )
            except Exception as e:
                audit.event = AuditEvent.PING_FAILURE
                audit.exception = e
                api_call = e.api_call if isinstance(e, PipelineError) else None
                raise PipelineError(PipelineFailure.PING_FAILURE, e, api_call=api_call) from e

    async def call_elasticsearch(self, request_data: RequestData) -> ApiCallDetails:
        with self.audit(AuditEvent.HEALTHY_RESPONSE, request_data.node) as audit:
            audit.path = request_data.path
            try:
                details = await self._connection.request(request_data)
                details.audit_trail = self.audit_trail
                self._throw_bad_authentication_when_needed(details)
                if not details.success:
                    audit.event = request_data.on_failure_audit_event
                return details
            except Exception as e:
                audit.event = request_data.on_failure_audit_event
                audit.exception = e
                raise

    def no_nodes_attempted_error(self, seen: list[PipelineError]) -> ElasticsearchClientError:
        self.add_audit(AuditEvent.NO_NODES_ATTEMPTED)
        return ElasticsearchClientError(
            "No nodes were attempted, this can happen when a node predicate does not match any nodes",
            failure_reason=PipelineFailure.NO_NODES_ATTEMPTED,
            audit_trail=self.audit_trail,
            original_error=_aggregate(list(seen)),
        )

    def create_client_error(
        self,
        details: ApiCallDetails | None,
        request_data: RequestData,
        seen: list[PipelineError],
    ) -> ElasticsearchClientError | None:
        if details is not None and details.success:
            return None

        inner = _aggregate(list(seen)) if seen else (details.original_exception if details else None)
        status = details.http_status_code if details is not None and details.http_status_code is not None else "unknown"
        resource = (
            f"Status code {status} from: {details.http_method.value} {details.path}"
            if details is not None else "unknown resource"
        )
        message = str(inner) if inner is not None else "Request failed to execute"

        failure = seen[-1].failure_reason if seen else request_data.on_failure_pipeline_failure
        if self.is_taking_too_long:
            failure = PipelineFailure.MAX_TIMEOUT_REACHED
            self.add_audit(AuditEvent.MAX_TIMEOUT_REACHED)
            message = "Maximum timeout reached while retrying request"
        elif self.retried >= self.max_retries and self.max_retries > 0:
            failure = PipelineFailure.MAX_RETRIES_REACHED
            self.add_audit(AuditEvent.MAX_RETRIES_REACHED)
            message = "Maximum number of retries reached"

        return ElasticsearchClientError(
            f"{message}. Call: {resource}",
            failure_reason=failure,
            api_call=details,
            audit_trail=self.audit_trail,
            original_error=inner,
        )
