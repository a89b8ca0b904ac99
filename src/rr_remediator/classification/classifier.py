"""Partition hosts by health and volumes by round-robin compliance."""

from __future__ import annotations

from typing import Iterable

from rr_remediator.classification.models import (
    HostClassification,
    VolumeCategory,
    VolumeClassification,
)
from rr_remediator.observation.models import HostSummary, VolumeSummary

CONNECTED = "connected"
POWERED_ON = "poweredOn"

# Switch paths after every command
TARGET_IOPS = 1


def is_healthy(host: HostSummary) -> bool:
    """A host is healthy when it is both connected and powered on."""
    return host.connection_state == CONNECTED and host.power_state == POWERED_ON


def classify_hosts(hosts: Iterable[HostSummary]) -> HostClassification:
    result = HostClassification()
    for host in hosts:
        if is_healthy(host):
            result.healthy.append(host)
        else:
            result.unhealthy.append(host)
    return result


def categorize_volume(volume: VolumeSummary) -> VolumeCategory:
    """Return the single category a volume belongs to."""
    if not volume.is_round_robin:
        return VolumeCategory.NON_ROUND_ROBIN
    if volume.iops == TARGET_IOPS:
        return VolumeCategory.COMPLIANT
    return VolumeCategory.NEEDS_REMEDIATION


def classify_volumes(volumes: Iterable[VolumeSummary]) -> VolumeClassification:
    result = VolumeClassification()
    buckets = result.by_category()
    for volume in volumes:
        buckets[categorize_volume(volume)].append(volume)
    return result
