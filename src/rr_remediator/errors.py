"""Failures raised by the remediation workflow.

Every error except :class:`TeardownWarning` is terminal: the CLI prints its
message and exits with status 1. ``state`` records the last workflow state
reached before the failure.
"""

from __future__ import annotations


class RemediatorError(Exception):
    """Base class for terminal workflow failures."""

    def __init__(self, message: str, state: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.state = state


class ConfigurationError(RemediatorError):
    """Settings, TLS context or output directory could not be prepared."""


class ReachabilityError(RemediatorError):
    """The management endpoint did not accept a TCP connection."""


class AuthenticationError(RemediatorError):
    """The endpoint was reachable but refused the session."""


class ClusterResolutionError(RemediatorError):
    """No cluster with the requested name exists."""


class InventoryRetrievalError(RemediatorError):
    """Host or volume inventory could not be read."""


class RemediationError(RemediatorError):
    """Setting or verifying a path-switch threshold failed."""


class TeardownWarning(UserWarning):
    """Disconnecting the session failed. Logged, never fatal."""
