"""CSV record sets written to the output directory."""

from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import Iterable

from rr_remediator.observation.models import HostSummary, VolumeSummary

logger = logging.getLogger(__name__)

VOLUME_FIELDS = ["canonical_name", "capacity_gb", "host", "policy", "iops"]
HOST_FIELDS = ["name", "connection_state", "power_state"]

UNHEALTHY_HOSTS = "unhealthy_hosts"
REMEDIATED = "remediated"


def report_path(output_dir: Path, cluster: str, name: str) -> Path:
    """Return <output_dir>/<cluster>_<name>.csv with the cluster name made filesystem-safe."""
    safe_cluster = re.sub(r"[^A-Za-z0-9._-]+", "_", cluster).strip("_") or "cluster"
    return Path(output_dir) / f"{safe_cluster}_{name}.csv"


def _write(path: Path, fields: list[str], rows: Iterable[dict[str, str]]) -> Path:
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=fields)
        writer.writeheader()
        writer.writerows(rows)
    logger.debug("Wrote %s", path)
    return path


def write_volume_report(
    output_dir: Path,
    cluster: str,
    name: str,
    volumes: list[VolumeSummary],
) -> Path | None:
    """Write one volume record set. Nothing is written for an empty set."""
    if not volumes:
        return None
    return _write(report_path(output_dir, cluster, name), VOLUME_FIELDS, (v.to_record() for v in volumes))


def write_host_report(output_dir: Path, cluster: str, hosts: list[HostSummary]) -> Path | None:
    """Write the unhealthy host record set. Nothing is written for an empty set."""
    if not hosts:
        return None
    rows = (
        {"name": h.name, "connection_state": h.connection_state, "power_state": h.power_state}
        for h in hosts
    )
    return _write(report_path(output_dir, cluster, UNHEALTHY_HOSTS), HOST_FIELDS, rows)
