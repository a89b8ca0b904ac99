"""Classification layer: host health and volume multipathing compliance."""

from rr_remediator.classification.classifier import (
    TARGET_IOPS,
    categorize_volume,
    classify_hosts,
    classify_volumes,
    is_healthy,
)
from rr_remediator.classification.models import (
    HostClassification,
    VolumeCategory,
    VolumeClassification,
)

__all__ = [
    "TARGET_IOPS",
    "HostClassification",
    "VolumeCategory",
    "VolumeClassification",
    "categorize_volume",
    "classify_hosts",
    "classify_volumes",
    "is_healthy",
]
