"""Shared fakes for the vCenter session and inventory collector."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import SecretStr

from rr_remediator.config import Settings
from rr_remediator.errors import ClusterResolutionError, TeardownWarning
from rr_remediator.observation.models import (
    ROUND_ROBIN_POLICY,
    ClusterSummary,
    HostSummary,
    VolumeSummary,
)
from rr_remediator.vsphere.esxcli import EsxcliError


def make_host(name: str, connection_state: str = "connected", power_state: str = "poweredOn") -> HostSummary:
    return HostSummary(name=name, connection_state=connection_state, power_state=power_state)


def make_volume(
    canonical_name: str,
    host: str,
    policy: str = ROUND_ROBIN_POLICY,
    iops: int | None = 1000,
    capacity_gb: float = 512.0,
) -> VolumeSummary:
    if policy != ROUND_ROBIN_POLICY:
        iops = None
    return VolumeSummary(
        canonical_name=canonical_name,
        host=host,
        policy=policy,
        iops=iops,
        capacity_gb=capacity_gb,
    )


class FakeSession:
    """Stands in for VsphereSession; counts close() calls."""

    def __init__(self, server: str = "vc.example.com", fail_close: bool = False) -> None:
        self.server = server
        self.fail_close = fail_close
        self.close_calls = 0

    def close(self) -> None:
        self.close_calls += 1
        if self.fail_close:
            raise TeardownWarning(f"Failed to disconnect from {self.server}: connection reset")


class FakeCollector:
    """
    In-memory cluster inventory with the InventoryCollector interface.
    Volume limits are mutable so repeated runs observe earlier changes.
    """

    def __init__(self, clusters: dict[str, tuple[list[HostSummary], list[VolumeSummary]]]) -> None:
        self.clusters = clusters
        self.calls: list[str] = []
        self.queried_hosts: list[str] = []
        self.set_calls: list[str] = []
        self.fail_set_on: str | None = None
        self.ignore_set = False
        self._cluster: str | None = None
        self._iops: dict[tuple[str, str], int | None] = {}
        for _, volumes in clusters.values():
            for v in volumes:
                self._iops[(v.host, v.canonical_name)] = v.iops

    def __call__(self, session: FakeSession) -> "FakeCollector":
        self.session = session
        return self

    def resolve_cluster(self, name: str) -> ClusterSummary:
        self.calls.append("resolve_cluster")
        if name not in self.clusters:
            raise ClusterResolutionError(f"Cluster {name!r} does not exist on {self.session.server}")
        self._cluster = name
        hosts, _ = self.clusters[name]
        return ClusterSummary(name=name, moid="domain-c8", host_count=len(hosts))

    def list_hosts(self) -> list[HostSummary]:
        self.calls.append("list_hosts")
        return list(self.clusters[self._cluster][0])

    def list_volumes(self, host_names) -> list[VolumeSummary]:
        self.calls.append("list_volumes")
        names = list(host_names)
        self.queried_hosts.extend(names)
        _, volumes = self.clusters[self._cluster]
        return [
            v.model_copy(update={"iops": self._iops[(v.host, v.canonical_name)]})
            for v in volumes
            if v.host in names
        ]

    def set_iops(self, volume: VolumeSummary, iops: int) -> None:
        self.set_calls.append(volume.canonical_name)
        if volume.canonical_name == self.fail_set_on:
            raise EsxcliError(f"deviceconfig.set on {volume.host} failed: device busy")
        if not self.ignore_set:
            self._iops[(volume.host, volume.canonical_name)] = iops

    def read_iops(self, volume: VolumeSummary) -> int:
        return self._iops[(volume.host, volume.canonical_name)]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        server="vc.example.com",
        username="administrator@vsphere.local",
        password=SecretStr("secret"),
        output_dir=tmp_path,
        _env_file=None,
    )
