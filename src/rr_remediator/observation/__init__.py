"""Observation layer: read cluster, host and volume inventory from vCenter."""

from rr_remediator.observation.collector import InventoryCollector
from rr_remediator.observation.models import (
    ROUND_ROBIN_POLICY,
    ClusterSummary,
    HostSummary,
    VolumeSummary,
)

__all__ = [
    "ROUND_ROBIN_POLICY",
    "ClusterSummary",
    "HostSummary",
    "InventoryCollector",
    "VolumeSummary",
]
