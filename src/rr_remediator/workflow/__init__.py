"""Workflow: connect → discover → classify → report → remediate → disconnect."""

from rr_remediator.workflow.orchestrator import (
    WorkflowResult,
    WorkflowState,
    build_report,
    print_result,
    run_workflow,
)

__all__ = [
    "WorkflowResult",
    "WorkflowState",
    "build_report",
    "print_result",
    "run_workflow",
]
