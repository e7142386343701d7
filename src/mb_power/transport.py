"""Interfaces of the device transport consumed by the power client.

Framing, the TLS handshake, device discovery and plist encoding all live
behind these interfaces. A concrete backend (see ``mb_power.usbmux``)
implements them; tests use in-memory fakes.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Protocol


class TransportError(IntEnum):
    """Error domain of the property-list service transport."""

    SUCCESS = 0
    INVALID_ARG = -1
    PLIST_ERROR = -2
    MUX_ERROR = -3
    SSL_ERROR = -4
    RECEIVE_TIMEOUT = -5
    NOT_ENOUGH_DATA = -6
    UNKNOWN_ERROR = -256


@dataclass(frozen=True)
class ServiceDescriptor:
    """Connectable descriptor of a started device service."""

    name: str
    port: int  # 0 when the backend does not expose it
    ssl_enabled: bool = False


class DeviceError(Exception):
    """Failure reported by the device/service-discovery collaborator."""

    code = "device_error"


class DeviceNotFoundError(DeviceError):
    """No device matched the lookup."""

    code = "device_not_found"


class LockdownError(DeviceError):
    """Control connection or handshake with the device failed."""

    code = "lockdown_failed"


class ServiceStartError(DeviceError):
    """The device refused to start the requested service."""

    code = "service_start_failed"


class TransportFailure(Exception):
    """A session could not be opened; carries the transport error code."""

    def __init__(self, code: TransportError | int, message: str = "") -> None:
        """Initialize with a transport error code and an optional description.

        Args:
            code: Transport error code reported by the backend.
            message: Human-readable detail.

        """
        super().__init__(message or f"transport error {int(code)}")
        self.code = code


class PlistSession(Protocol):
    """An open, framed property-list channel to one device service."""

    def send_plist(self, document: dict[str, Any]) -> TransportError:
        """Send one document using the binary plist encoding."""
        ...

    def receive_plist(self, timeout_ms: int) -> tuple[dict[str, Any] | None, TransportError]:
        """Wait up to ``timeout_ms`` for one document."""
        ...

    def close(self) -> TransportError:
        """Close the channel."""
        ...


class Device(Protocol):
    """A resolved device handle."""

    udid: str

    def start_service(self, name: str, label: str) -> ServiceDescriptor:
        """Handshake with the device and start the named service.

        Raises:
            LockdownError: Handshake failed.
            ServiceStartError: The service could not be started.

        """
        ...

    def connect(self, service: ServiceDescriptor) -> PlistSession:
        """Open a session to a started service.

        Raises:
            TransportFailure: The connection could not be established.

        """
        ...

    def close(self) -> None:
        """Release the device handle."""
        ...


class DeviceConnector(Protocol):
    """Resolves devices by identifier, or the first available one."""

    def open_device(self, udid: str | None, *, network: bool) -> Device:
        """Return a handle for the device.

        Args:
            udid: Target device identifier; ``None`` selects the first device found.
            network: Include network-attached devices in the lookup.

        Raises:
            DeviceNotFoundError: No matching device.

        """
        ...
