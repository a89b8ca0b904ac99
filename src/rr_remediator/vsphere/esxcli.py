"""Round-robin device configuration through a host's esxcli namespace.

The vSphere API exposes the path selection policy of a LUN but not the
round-robin switching limit, so both reads and writes go through
``esxcli storage nmp psp roundrobin deviceconfig`` invoked over the host's
managed method executer.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from xml.sax.saxutils import escape
from typing import Any

from pyVmomi import vmodl

logger = logging.getLogger(__name__)

ROUNDROBIN_DEVICECONFIG_MOID = "ha-cli-handler-storage-nmp-psp-roundrobin-deviceconfig"
ROUNDROBIN_DEVICECONFIG_METHOD = "vim.EsxCLI.storage.nmp.psp.roundrobin.deviceconfig"
ESXCLI_VERSION = "urn:vim25/5.0"


class EsxcliError(Exception):
    """An esxcli call returned a fault or an unreadable response."""


def _soap_argument(name: str, value: Any) -> Any:
    return vmodl.reflect.ManagedMethodExecuter.SoapArgument(
        name=name,
        val=f"<{name}>{escape(str(value))}</{name}>",
    )


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_iops_limit(response: str) -> int:
    """Extract IOOperationLimit from a deviceconfig.get response document."""
    try:
        root = ET.fromstring(response)
    except ET.ParseError as e:
        raise EsxcliError(f"Malformed esxcli response: {e}") from e
    for elem in root.iter():
        if _local_name(elem.tag) == "IOOperationLimit" and elem.text:
            try:
                return int(elem.text.strip())
            except ValueError as e:
                raise EsxcliError(f"Non-numeric IOOperationLimit: {elem.text!r}") from e
    raise EsxcliError("IOOperationLimit missing from esxcli response")


class RoundRobinDeviceConfig:
    """esxcli round-robin deviceconfig get/set bound to one HostSystem."""

    def __init__(self, host: Any) -> None:
        self.host_name = host.name
        self._executer = host.RetrieveManagedMethodExecuter()

    def _execute(self, verb: str, arguments: list[Any]) -> str:
        result = self._executer.ExecuteSoap(
            moid=ROUNDROBIN_DEVICECONFIG_MOID,
            version=ESXCLI_VERSION,
            method=f"{ROUNDROBIN_DEVICECONFIG_METHOD}.{verb}",
            argument=arguments,
        )
        if result is None:
            return ""
        if getattr(result, "fault", None):
            fault = result.fault
            raise EsxcliError(
                f"deviceconfig.{verb} on {self.host_name} failed: {getattr(fault, 'faultMsg', fault)}"
            )
        return result.response or ""

    def get_iops(self, device: str) -> int:
        """Return the number of commands issued on a path before switching."""
        response = self._execute("get", [_soap_argument("device", device)])
        return parse_iops_limit(response)

    def set_iops(self, device: str, iops: int) -> None:
        """Switch paths after every `iops` commands on device."""
        logger.debug("Setting iops=%d on %s (%s)", iops, device, self.host_name)
        self._execute(
            "set",
            [
                _soap_argument("device", device),
                _soap_argument("iops", iops),
                _soap_argument("type", "iops"),
            ],
        )
