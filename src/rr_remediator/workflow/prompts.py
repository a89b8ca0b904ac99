"""Message templates for the console report."""

REPORT_HEADER = """
# Round-robin remediation report
"""

REPORT_SECTION_CLUSTER = """
## Cluster
**{cluster}** on {server}: {healthy} of {total} hosts healthy, {volumes} disk volumes inspected.
"""

REPORT_SECTION_UNHEALTHY = """
## Unhealthy hosts (skipped)
{hosts}
"""

REPORT_NO_HEALTHY_HOSTS = """
No host is both connected and powered on; no volumes were inspected.
"""

REPORT_SECTION_VOLUMES = """
## Volumes
- Not using round-robin: {non_round_robin}
- Already switching after 1 command: {compliant}
- Needing remediation: {needs_remediation}
"""

REPORT_SECTION_REMEDIATION = """
## Remediation
{count} volume(s) now switch paths after every command.
"""

REPORT_NOTHING_TO_REMEDIATE = """
## Remediation
Nothing to do: every round-robin volume already switches paths after every command.
"""

REPORT_DRY_RUN = """
(Dry run: no path-switch threshold was changed.)
"""

REPORT_SECTION_FILES = """
## Reports written
{files}
"""

REPORT_TEARDOWN_WARNING = """
**Warning:** {warning}
"""
