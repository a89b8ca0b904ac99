"""Remediation layer: apply switching limits and verify they took effect."""

from rr_remediator.remediation.actions import apply_remediation, verify_remediation

__all__ = [
    "apply_remediation",
    "verify_remediation",
]
