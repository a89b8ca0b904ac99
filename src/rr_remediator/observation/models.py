"""Structured models for the vCenter inventory the workflow inspects."""

from __future__ import annotations

from pydantic import BaseModel, Field

ROUND_ROBIN_POLICY = "VMW_PSP_RR"


class ClusterSummary(BaseModel):
    """A resolved cluster."""

    name: str
    moid: str = Field(..., description="Managed object id, e.g. domain-c8")
    host_count: int = 0


class HostSummary(BaseModel):
    """ESXi host state used to decide whether its volumes are queried."""

    name: str
    connection_state: str  # connected | disconnected | notResponding
    power_state: str  # poweredOn | poweredOff | standBy | unknown
    in_maintenance_mode: bool = False


class VolumeSummary(BaseModel):
    """A disk-type SCSI LUN as seen by one host."""

    canonical_name: str = Field(..., description="Device identifier, e.g. naa.600a0980...")
    vendor: str = ""
    model: str = ""
    capacity_gb: float = 0.0
    host: str = Field(..., description="Name of the host the LUN belongs to")
    policy: str = Field(..., description="Path selection policy, e.g. VMW_PSP_RR")
    iops: int | None = Field(
        default=None,
        description="Commands issued on a path before switching; None unless round-robin",
    )

    @property
    def is_round_robin(self) -> bool:
        return self.policy == ROUND_ROBIN_POLICY

    def to_record(self) -> dict[str, str]:
        """Flatten to the CSV record layout."""
        return {
            "canonical_name": self.canonical_name,
            "capacity_gb": f"{self.capacity_gb:.2f}",
            "host": self.host,
            "policy": self.policy,
            "iops": "" if self.iops is None else str(self.iops),
        }
