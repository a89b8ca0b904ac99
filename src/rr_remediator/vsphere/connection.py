"""vCenter reachability probe and session lifecycle."""

from __future__ import annotations

import logging
import socket
import ssl
from typing import Any

from pyVim.connect import SmartConnect
from pyVmomi import vim, vmodl

from rr_remediator.config import Settings
from rr_remediator.errors import (
    AuthenticationError,
    ConfigurationError,
    ReachabilityError,
    TeardownWarning,
)

logger = logging.getLogger(__name__)


def build_ssl_context(disable_verification: bool) -> ssl.SSLContext:
    """Return the TLS context used for the vCenter connection."""
    context = ssl.create_default_context()
    if disable_verification:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def probe_endpoint(server: str, port: int, timeout: float) -> None:
    """Open and close a TCP connection to server:port, raising ReachabilityError on failure."""
    logger.debug("Probing %s:%d (timeout %.1fs)", server, port, timeout)
    try:
        with socket.create_connection((server, port), timeout=timeout):
            pass
    except OSError as e:
        raise ReachabilityError(f"vCenter {server}:{port} is unreachable: {e}") from e


class VsphereSession:
    """An authenticated connection to one vCenter server."""

    def __init__(self, service_instance: Any, server: str) -> None:
        self.server = server
        self._si = service_instance
        self._closed = False

    @property
    def content(self) -> Any:
        return self._si.RetrieveContent()

    def list_objects(self, vimtype: Any, container: Any = None) -> list[Any]:
        """Return all managed objects of vimtype under container (root folder by default)."""
        content = self.content
        view = content.viewManager.CreateContainerView(
            container or content.rootFolder,
            [vimtype],
            True,
        )
        try:
            return list(view.view)
        finally:
            view.Destroy()

    def close(self) -> None:
        """Disconnect once. Failures are raised as TeardownWarning."""
        if self._closed:
            return
        self._closed = True
        try:
            self._si.RetrieveContent().sessionManager.Logout()
        except (vmodl.MethodFault, OSError) as e:
            raise TeardownWarning(f"Failed to log out of {self.server}: {e}") from e
        finally:
            # Logout does not release the pooled HTTPS connections
            self._si._stub.DropConnections()
        logger.debug("Disconnected from %s", self.server)


def open_session(settings: Settings, ssl_context: ssl.SSLContext) -> VsphereSession:
    """Authenticate against settings.server and return the session."""
    if not settings.server:
        raise ConfigurationError("No vCenter server configured")
    if not settings.username or settings.password is None:
        raise ConfigurationError("vCenter credentials are required")
    try:
        si = SmartConnect(
            host=settings.server,
            user=settings.username,
            pwd=settings.password.get_secret_value(),
            port=settings.port,
            sslContext=ssl_context,
        )
    except vim.fault.InvalidLogin as e:
        raise AuthenticationError(f"vCenter {settings.server} rejected the credentials for {settings.username}") from e
    except (vmodl.MethodFault, OSError) as e:
        raise AuthenticationError(f"Could not establish a session with {settings.server}: {e}") from e
    if not si:
        raise AuthenticationError(f"Could not establish a session with {settings.server}")
    logger.info("Connected to %s as %s", settings.server, settings.username)
    return VsphereSession(si, settings.server)
