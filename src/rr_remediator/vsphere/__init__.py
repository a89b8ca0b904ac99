"""vSphere access: reachability, sessions and esxcli device configuration."""

from rr_remediator.vsphere.connection import (
    VsphereSession,
    build_ssl_context,
    open_session,
    probe_endpoint,
)
from rr_remediator.vsphere.esxcli import EsxcliError, RoundRobinDeviceConfig

__all__ = [
    "EsxcliError",
    "RoundRobinDeviceConfig",
    "VsphereSession",
    "build_ssl_context",
    "open_session",
    "probe_endpoint",
]
