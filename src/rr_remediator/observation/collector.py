"""Collect cluster, host and volume inventory from a vCenter session."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from pyVmomi import vim, vmodl

from rr_remediator.errors import ClusterResolutionError, InventoryRetrievalError
from rr_remediator.observation.models import (
    ROUND_ROBIN_POLICY,
    ClusterSummary,
    HostSummary,
    VolumeSummary,
)
from rr_remediator.vsphere.connection import VsphereSession
from rr_remediator.vsphere.esxcli import EsxcliError, RoundRobinDeviceConfig

logger = logging.getLogger(__name__)

# Only block devices; cdrom, tape, enclosure etc. are skipped
DISK_LUN_TYPE = "disk"

GIB = 1024**3


def _build_host_summary(host: Any) -> HostSummary:
    """Build HostSummary from vim.HostSystem."""
    runtime = host.runtime
    return HostSummary(
        name=host.name,
        connection_state=str(getattr(runtime, "connectionState", "") or "unknown"),
        power_state=str(getattr(runtime, "powerState", "") or "unknown"),
        in_maintenance_mode=bool(getattr(runtime, "inMaintenanceMode", False)),
    )


def _capacity_gb(lun: Any) -> float:
    capacity = getattr(lun, "capacity", None)
    if not capacity:
        return 0.0
    return round((capacity.block or 0) * (capacity.blockSize or 0) / GIB, 2)


def _lun_policies(storage_device: Any) -> dict[str, str]:
    """Map ScsiLun key -> path selection policy from multipathInfo."""
    policies: dict[str, str] = {}
    multipath = getattr(storage_device, "multipathInfo", None)
    for mp_lun in getattr(multipath, "lun", None) or []:
        policy = getattr(mp_lun.policy, "policy", None) if mp_lun.policy else None
        policies[mp_lun.lun] = policy or "unknown"
    return policies


class InventoryCollector:
    """Resolves a cluster and reads its hosts and disk volumes."""

    def __init__(
        self,
        session: VsphereSession,
        device_config_factory: Callable[[Any], RoundRobinDeviceConfig] = RoundRobinDeviceConfig,
    ) -> None:
        self._session = session
        self._device_config_factory = device_config_factory
        self._cluster: Any = None
        self._cluster_name = ""
        self._hosts: dict[str, Any] = {}
        self._device_configs: dict[str, RoundRobinDeviceConfig] = {}

    def resolve_cluster(self, name: str) -> ClusterSummary:
        """Find the cluster whose name is exactly `name`."""
        try:
            clusters = self._session.list_objects(vim.ClusterComputeResource)
            matches = [c for c in clusters if c.name == name]
            if not matches:
                raise ClusterResolutionError(f"Cluster {name!r} does not exist on {self._session.server}")
            if len(matches) > 1:
                raise ClusterResolutionError(
                    f"Cluster name {name!r} matches {len(matches)} clusters on {self._session.server}"
                )
            cluster = matches[0]
            summary = ClusterSummary(
                name=name,
                moid=cluster._moId,
                host_count=len(cluster.host or []),
            )
        except vmodl.MethodFault as e:
            raise InventoryRetrievalError(f"Failed to resolve cluster {name!r}: {e.msg}") from e
        self._cluster = cluster
        self._cluster_name = name
        self._hosts = {}
        logger.info("Resolved cluster %s (%s)", summary.name, summary.moid)
        return summary

    def list_hosts(self) -> list[HostSummary]:
        """Return every host of the resolved cluster."""
        if self._cluster is None:
            raise ClusterResolutionError("No cluster resolved")
        try:
            hosts = list(self._cluster.host or [])
            summaries = []
            for host in hosts:
                summaries.append(_build_host_summary(host))
                self._hosts[host.name] = host
        except vmodl.MethodFault as e:
            raise InventoryRetrievalError(f"Failed to list hosts of {self._cluster_name}: {e.msg}") from e
        return summaries

    def list_volumes(self, host_names: Iterable[str]) -> list[VolumeSummary]:
        """Return the disk-type LUNs of the given hosts, with their round-robin limits."""
        volumes: list[VolumeSummary] = []
        for host_name in host_names:
            volumes.extend(self._host_volumes(host_name))
        return volumes

    def read_iops(self, volume: VolumeSummary) -> int:
        """Re-read the switching limit of one round-robin volume."""
        try:
            return self._device_config(volume.host).get_iops(volume.canonical_name)
        except (EsxcliError, vmodl.MethodFault) as e:
            raise InventoryRetrievalError(
                f"Failed to read round-robin config of {volume.canonical_name} on {volume.host}: {e}"
            ) from e

    def set_iops(self, volume: VolumeSummary, iops: int) -> None:
        """Apply a new switching limit. SDK failures propagate unchanged."""
        self._device_config(volume.host).set_iops(volume.canonical_name, iops)

    def _host(self, host_name: str) -> Any:
        try:
            return self._hosts[host_name]
        except KeyError:
            raise InventoryRetrievalError(f"Host {host_name} is not part of the resolved cluster") from None

    def _device_config(self, host_name: str) -> RoundRobinDeviceConfig:
        if host_name not in self._device_configs:
            self._device_configs[host_name] = self._device_config_factory(self._host(host_name))
        return self._device_configs[host_name]

    def _host_volumes(self, host_name: str) -> list[VolumeSummary]:
        host = self._host(host_name)
        volumes: list[VolumeSummary] = []
        try:
            storage_device = host.config.storageDevice
            policies = _lun_policies(storage_device)
            for lun in storage_device.scsiLun or []:
                if getattr(lun, "lunType", None) != DISK_LUN_TYPE:
                    continue
                policy = policies.get(lun.key, "unknown")
                iops = None
                if policy == ROUND_ROBIN_POLICY:
                    iops = self._device_config(host_name).get_iops(lun.canonicalName)
                volumes.append(
                    VolumeSummary(
                        canonical_name=lun.canonicalName,
                        vendor=(getattr(lun, "vendor", "") or "").strip(),
                        model=(getattr(lun, "model", "") or "").strip(),
                        capacity_gb=_capacity_gb(lun),
                        host=host_name,
                        policy=policy,
                        iops=iops,
                    )
                )
        except (EsxcliError, vmodl.MethodFault) as e:
            raise InventoryRetrievalError(f"Failed to list volumes of {host_name}: {e}") from e
        logger.debug("Host %s: %d disk volumes", host_name, len(volumes))
        return volumes
