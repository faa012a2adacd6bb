"""Audit trail records produced by the request pipeline."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .node import Node


class AuditEvent(str, Enum):
    SNIFF_ON_STARTUP = "SniffOnStartup"
    SNIFF_ON_FAIL = "SniffOnFail"
    SNIFF_ON_STALE_CLUSTER = "SniffOnStaleCluster"
    SNIFF_SUCCESS = "SniffSuccess"
    SNIFF_FAILURE = "SniffFailure"
    PING_SUCCESS = "PingSuccess"
    PING_FAILURE = "PingFailure"
    RESURRECTION = "Resurrection"
    ALL_NODES_DEAD = "AllNodesDead"
    BAD_RESPONSE = "BadResponse"
    HEALTHY_RESPONSE = "HealthyResponse"
    MAX_TIMEOUT_REACHED = "MaxTimeoutReached"
    MAX_RETRIES_REACHED = "MaxRetriesReached"
    BAD_REQUEST = "BadRequest"
    NO_NODES_ATTEMPTED = "NoNodesAttempted"
    FAILED_OVER_ALL_NODES = "FailedOverAllNodes"


class Audit(BaseModel):
    """One step of a call: what happened, on which node, and how long it took."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    event: AuditEvent
    started: datetime
    ended: datetime | None = None
    node: Node | None = None
    path: str | None = None
    exception: BaseException | None = Field(default=None, exclude=True)

    @property
    def took(self):
        if self.ended is None:
            return None
        return self.ended - self.started

    def __str__(self) -> str:
        node = self.node.uri if self.node is not None else "n/a"
        took = self.took if self.took is not None else "n/a"
        return f"{self.event.value}: Node: {node} Took: {took}"
