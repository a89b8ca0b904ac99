"""Orchestrator: connect → discover → classify → report → remediate → disconnect."""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from rr_remediator.classification import (
    HostClassification,
    VolumeCategory,
    VolumeClassification,
    classify_hosts,
    classify_volumes,
)
from rr_remediator.config import Settings, get_settings
from rr_remediator.errors import (
    ConfigurationError,
    RemediationError,
    RemediatorError,
    TeardownWarning,
)
from rr_remediator.observation import ClusterSummary, HostSummary, InventoryCollector, VolumeSummary
from rr_remediator.remediation import apply_remediation, verify_remediation
from rr_remediator.vsphere import VsphereSession, build_ssl_context, open_session, probe_endpoint
from rr_remediator.workflow import reports
from rr_remediator.workflow.prompts import (
    REPORT_DRY_RUN,
    REPORT_HEADER,
    REPORT_NO_HEALTHY_HOSTS,
    REPORT_NOTHING_TO_REMEDIATE,
    REPORT_SECTION_CLUSTER,
    REPORT_SECTION_FILES,
    REPORT_SECTION_REMEDIATION,
    REPORT_SECTION_UNHEALTHY,
    REPORT_SECTION_VOLUMES,
    REPORT_TEARDOWN_WARNING,
)

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    """States of a single run, in order."""

    START = "start"
    INITIALIZED = "initialized"
    CONNECTED = "connected"
    AUTHENTICATED = "authenticated"
    CLUSTER_RESOLVED = "cluster_resolved"
    HOSTS_CLASSIFIED = "hosts_classified"
    VOLUMES_CLASSIFIED = "volumes_classified"
    REMEDIATED = "remediated"
    DISCONNECTED = "disconnected"


@dataclass
class WorkflowResult:
    """Result of a full remediation run."""

    server: str
    cluster: ClusterSummary
    hosts: HostClassification
    volumes: VolumeClassification
    remediated: list[VolumeSummary] = field(default_factory=list)
    dry_run: bool = False
    reports: dict[str, Path] = field(default_factory=dict)
    state: WorkflowState = WorkflowState.START
    teardown_warning: str | None = None
    report: str = ""


class _Progress:
    def __init__(self) -> None:
        self.state = WorkflowState.START

    def advance(self, state: WorkflowState) -> None:
        logger.debug("%s -> %s", self.state.value, state.value)
        self.state = state


def _initialize(opts: Settings, cluster_name: str | None) -> ssl.SSLContext:
    """Validate inputs, build the TLS context and prepare the output directory."""
    if not opts.server:
        raise ConfigurationError("A vCenter server is required")
    if not cluster_name:
        raise ConfigurationError("A cluster name is required")
    try:
        context = build_ssl_context(opts.disable_ssl_verification)
    except ssl.SSLError as e:
        raise ConfigurationError(f"Could not prepare the TLS context: {e}") from e
    try:
        opts.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigurationError(f"Output directory {opts.output_dir} is not usable: {e}") from e
    return context


def _teardown(session: VsphereSession) -> str | None:
    """Close the session; a failure is only logged."""
    try:
        session.close()
    except TeardownWarning as w:
        logger.warning("%s", w)
        return str(w)
    return None


def _remediate_cluster(
    session: VsphereSession,
    cluster_name: str,
    opts: Settings,
    collector_factory: Callable[[VsphereSession], Any],
    progress: _Progress,
) -> WorkflowResult:
    collector = collector_factory(session)

    cluster = collector.resolve_cluster(cluster_name)
    progress.advance(WorkflowState.CLUSTER_RESOLVED)

    hosts = classify_hosts(collector.list_hosts())
    for host in hosts.unhealthy:
        logger.warning(
            "Skipping host %s (connection=%s, power=%s)",
            host.name,
            host.connection_state,
            host.power_state,
        )
    if not hosts.healthy:
        logger.warning("No healthy hosts in cluster %s; no volumes to inspect", cluster.name)
    progress.advance(WorkflowState.HOSTS_CLASSIFIED)

    volumes = classify_volumes(collector.list_volumes(hosts.healthy_names))
    progress.advance(WorkflowState.VOLUMES_CLASSIFIED)

    result = WorkflowResult(
        server=session.server,
        cluster=cluster,
        hosts=hosts,
        volumes=volumes,
        dry_run=opts.dry_run,
    )

    written = reports.write_host_report(opts.output_dir, cluster.name, hosts.unhealthy)
    if written:
        result.reports[reports.UNHEALTHY_HOSTS] = written
    for category, members in volumes.by_category().items():
        written = reports.write_volume_report(opts.output_dir, cluster.name, category.value, members)
        if written:
            result.reports[category.value] = written

    if opts.dry_run:
        logger.info("Dry run: %d volume(s) left unchanged", len(volumes.needs_remediation))
        return result

    if volumes.needs_remediation:
        apply_remediation(collector, volumes.needs_remediation)
        converged, pending = verify_remediation(collector, volumes.needs_remediation)
        if pending:
            names = ", ".join(f"{v.canonical_name} ({v.host}, iops={v.iops})" for v in pending)
            raise RemediationError(f"{len(pending)} volume(s) did not converge to iops=1: {names}")
        result.remediated = converged
        written = reports.write_volume_report(opts.output_dir, cluster.name, reports.REMEDIATED, converged)
        if written:
            result.reports[reports.REMEDIATED] = written
    progress.advance(WorkflowState.REMEDIATED)
    return result


def run_workflow(
    settings: Settings | None = None,
    cluster_name: str | None = None,
    probe: Callable[[str, int, float], None] = probe_endpoint,
    session_factory: Callable[[Settings, ssl.SSLContext], VsphereSession] = open_session,
    collector_factory: Callable[[VsphereSession], Any] = InventoryCollector,
) -> WorkflowResult:
    """
    Run the remediation workflow once. Raises a RemediatorError subclass on any terminal
    failure; once a session exists it is closed exactly once on every exit path.
    """
    opts = settings or get_settings()
    name = cluster_name or opts.cluster
    progress = _Progress()

    try:
        ssl_context = _initialize(opts, name)
        progress.advance(WorkflowState.INITIALIZED)
        probe(opts.server, opts.port, opts.connect_timeout)
        progress.advance(WorkflowState.CONNECTED)
        session = session_factory(opts, ssl_context)
        progress.advance(WorkflowState.AUTHENTICATED)
    except RemediatorError as e:
        e.state = progress.state.value
        logger.debug("Aborted after %s: %s", e.state, e.message)
        raise

    try:
        result = _remediate_cluster(session, name, opts, collector_factory, progress)
    except RemediatorError as e:
        e.state = progress.state.value
        logger.debug("Aborted after %s: %s", e.state, e.message)
        raise
    finally:
        teardown_warning = _teardown(session)
        progress.advance(WorkflowState.DISCONNECTED)

    result.teardown_warning = teardown_warning
    result.state = progress.state
    result.report = build_report(result)
    return result


def _host_line(host: HostSummary) -> str:
    line = f"- {host.name}: connection={host.connection_state}, power={host.power_state}"
    if host.in_maintenance_mode:
        line += ", in maintenance mode"
    return line


def build_report(result: WorkflowResult) -> str:
    """Render the Markdown summary shown on the console."""
    hosts = result.hosts
    volumes = result.volumes
    parts = [
        REPORT_HEADER,
        REPORT_SECTION_CLUSTER.format(
            cluster=result.cluster.name,
            server=result.server,
            healthy=len(hosts.healthy),
            total=len(hosts.healthy) + len(hosts.unhealthy),
            volumes=volumes.total,
        ),
    ]
    if hosts.unhealthy:
        host_lines = "\n".join(_host_line(h) for h in hosts.unhealthy)
        parts.append(REPORT_SECTION_UNHEALTHY.format(hosts=host_lines))
    if not hosts.healthy:
        parts.append(REPORT_NO_HEALTHY_HOSTS)
    parts.append(
        REPORT_SECTION_VOLUMES.format(
            non_round_robin=len(volumes.non_round_robin),
            compliant=len(volumes.compliant),
            needs_remediation=len(volumes.needs_remediation),
        )
    )
    if result.dry_run:
        parts.append(REPORT_DRY_RUN)
    elif result.remediated:
        parts.append(REPORT_SECTION_REMEDIATION.format(count=len(result.remediated)))
    else:
        parts.append(REPORT_NOTHING_TO_REMEDIATE)
    if result.reports:
        parts.append(REPORT_SECTION_FILES.format(files="\n".join(f"- `{p}`" for p in result.reports.values())))
    if result.teardown_warning:
        parts.append(REPORT_TEARDOWN_WARNING.format(warning=result.teardown_warning))
    return "\n".join(parts)


def _volume_table(title: str, volumes: list[VolumeSummary]) -> Table:
    table = Table(title=title)
    table.add_column("Volume")
    table.add_column("Capacity (GB)", justify="right")
    table.add_column("Host")
    table.add_column("Array")
    table.add_column("Policy")
    table.add_column("IOPS", justify="right")
    for v in volumes:
        table.add_row(
            v.canonical_name,
            f"{v.capacity_gb:.2f}",
            v.host,
            f"{v.vendor} {v.model}".strip(),
            v.policy,
            "" if v.iops is None else str(v.iops),
        )
    return table


_TABLE_TITLES = {
    VolumeCategory.NON_ROUND_ROBIN: "Volumes not using round-robin",
    VolumeCategory.COMPLIANT: "Volumes already compliant",
    VolumeCategory.NEEDS_REMEDIATION: "Volumes needing remediation",
}


def print_result(result: WorkflowResult, console: Console | None = None) -> None:
    """Print workflow result to console using Rich."""
    c = console or Console()
    c.print(Panel(Markdown(result.report), title="Round-robin Remediation", border_style="blue"))
    for category, members in result.volumes.by_category().items():
        if members:
            c.print(_volume_table(_TABLE_TITLES[category], members))
    if result.remediated:
        c.print(_volume_table("Volumes remediated", result.remediated))
