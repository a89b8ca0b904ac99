"""Apply and verify round-robin switching limits on vCenter volumes."""

from __future__ import annotations

import logging

from pyVmomi import vmodl

from rr_remediator.classification.classifier import TARGET_IOPS
from rr_remediator.errors import InventoryRetrievalError, RemediationError
from rr_remediator.observation.collector import InventoryCollector
from rr_remediator.observation.models import VolumeSummary
from rr_remediator.vsphere.esxcli import EsxcliError

logger = logging.getLogger(__name__)


def apply_remediation(
    collector: InventoryCollector,
    volumes: list[VolumeSummary],
    iops: int = TARGET_IOPS,
) -> list[VolumeSummary]:
    """
    Set the switching limit of every volume to `iops`, one call per volume.
    The first failure raises RemediationError; volumes after it are not touched.
    """
    applied: list[VolumeSummary] = []
    for volume in volumes:
        try:
            collector.set_iops(volume, iops)
        except (EsxcliError, vmodl.MethodFault) as e:
            logger.error("Setting iops=%d on %s (%s) failed", iops, volume.canonical_name, volume.host)
            raise RemediationError(
                f"Failed to set iops={iops} on {volume.canonical_name} ({volume.host}) "
                f"after {len(applied)} of {len(volumes)} volumes: {e}"
            ) from e
        logger.info("Set iops=%d on %s (%s)", iops, volume.canonical_name, volume.host)
        applied.append(volume.model_copy(update={"iops": iops}))
    return applied


def verify_remediation(
    collector: InventoryCollector,
    volumes: list[VolumeSummary],
    iops: int = TARGET_IOPS,
) -> tuple[list[VolumeSummary], list[VolumeSummary]]:
    """
    Re-read each volume's switching limit. Returns (converged, pending), both carrying
    the value read back from the host.
    """
    converged: list[VolumeSummary] = []
    pending: list[VolumeSummary] = []
    for volume in volumes:
        try:
            current = collector.read_iops(volume)
        except InventoryRetrievalError as e:
            raise RemediationError(f"Could not verify {volume.canonical_name} ({volume.host}): {e}") from e
        updated = volume.model_copy(update={"iops": current})
        if current == iops:
            converged.append(updated)
        else:
            pending.append(updated)
    return converged, pending
