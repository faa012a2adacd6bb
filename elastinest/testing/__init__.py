"""Test doubles: a virtual cluster with scripted answers and a settable clock."""

from .connection import DEFAULT_RESPONSE, CallState, VirtualClusterConnection
from .date_time_provider import TestableDateTimeProvider
from .rules import ClientCallRule, PingRule, Rule, SniffRule, Times
from .sniff_response import SniffResponseBytes
from .virtual_cluster import SealedVirtualCluster, VirtualCluster, VirtualizedCluster

__all__ = [
    "DEFAULT_RESPONSE",
    "CallState",
    "ClientCallRule",
    "PingRule",
    "Rule",
    "SealedVirtualCluster",
    "SniffResponseBytes",
    "SniffRule",
    "TestableDateTimeProvider",
    "Times",
    "VirtualCluster",
    "VirtualClusterConnection",
    "VirtualizedCluster",
]
