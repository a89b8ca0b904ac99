"""Outputs of host and volume classification."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from rr_remediator.observation.models import HostSummary, VolumeSummary


class VolumeCategory(str, Enum):
    """Disjoint volume categories; exactly one applies to every volume."""

    NON_ROUND_ROBIN = "non_round_robin"
    COMPLIANT = "compliant"
    NEEDS_REMEDIATION = "needs_remediation"


class HostClassification(BaseModel):
    """Hosts split by whether their volumes may be queried."""

    healthy: list[HostSummary] = Field(default_factory=list)
    unhealthy: list[HostSummary] = Field(default_factory=list)

    @property
    def healthy_names(self) -> list[str]:
        return [h.name for h in self.healthy]


class VolumeClassification(BaseModel):
    """Volumes of healthy hosts split by multipathing compliance."""

    non_round_robin: list[VolumeSummary] = Field(default_factory=list)
    compliant: list[VolumeSummary] = Field(default_factory=list)
    needs_remediation: list[VolumeSummary] = Field(default_factory=list)

    def by_category(self) -> dict[VolumeCategory, list[VolumeSummary]]:
        return {
            VolumeCategory.NON_ROUND_ROBIN: self.non_round_robin,
            VolumeCategory.COMPLIANT: self.compliant,
            VolumeCategory.NEEDS_REMEDIATION: self.needs_remediation,
        }

    @property
    def total(self) -> int:
        return len(self.non_round_robin) + len(self.compliant) + len(self.needs_remediation)
