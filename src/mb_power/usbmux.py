"""Device backend on top of pymobiledevice3 (usbmuxd discovery and lockdown services).

Install with the ``device`` extra. Only imported when selected as the configured backend.
The library's lockdown and service-connection calls are coroutines; each device owns
one event loop and drives them to completion, keeping this backend synchronous.
"""

import asyncio
import inspect
import logging
import plistlib
import ssl
from dataclasses import dataclass, field
from typing import Any

from pymobiledevice3.exceptions import PyMobileDevice3Exception
from pymobiledevice3.lockdown import create_using_usbmux
from pymobiledevice3.usbmux import select_device

from mb_power.transport import (
    DeviceNotFoundError,
    LockdownError,
    ServiceDescriptor,
    ServiceStartError,
    TransportError,
    TransportFailure,
)

logger = logging.getLogger(__name__)


def _wait(loop: asyncio.AbstractEventLoop, result: Any, timeout: float | None = None) -> Any:
    """Run an awaitable on ``loop`` and return its value; plain values pass through."""
    if not inspect.isawaitable(result):
        return result
    if timeout is not None:
        result = asyncio.wait_for(result, timeout)
    return loop.run_until_complete(result)


def _error_from_exception(e: BaseException) -> TransportError:
    """Classify a socket-level failure into the transport error domain."""
    # TimeoutError and SSLError are both OSError subclasses; order matters.
    match e:
        case TimeoutError():
            return TransportError.RECEIVE_TIMEOUT
        case ssl.SSLError():
            return TransportError.SSL_ERROR
        case plistlib.InvalidFileException() | ValueError():
            return TransportError.PLIST_ERROR
        case ConnectionAbortedError() | asyncio.IncompleteReadError():
            return TransportError.NOT_ENOUGH_DATA
        case OSError() | PyMobileDevice3Exception():
            return TransportError.MUX_ERROR
        case _:
            return TransportError.UNKNOWN_ERROR


@dataclass(frozen=True)
class UsbmuxService(ServiceDescriptor):
    """Descriptor of a service started through lockdown, carrying its open connection."""

    connection: Any = field(default=None, compare=False, repr=False)


class UsbmuxSession:
    """PlistSession over a pymobiledevice3 service connection."""

    def __init__(self, conn: Any, loop: asyncio.AbstractEventLoop) -> None:
        self._conn = conn
        self._loop = loop

    def send_plist(self, document: dict[str, Any]) -> TransportError:
        try:
            _wait(self._loop, self._conn.send_plist(document, fmt=plistlib.FMT_BINARY))
        except (OSError, EOFError, PyMobileDevice3Exception) as e:
            logger.debug("send_plist failed: %s", e)
            return _error_from_exception(e)
        return TransportError.SUCCESS

    def receive_plist(self, timeout_ms: int) -> tuple[dict[str, Any] | None, TransportError]:
        try:
            document = _wait(self._loop, self._conn.recv_plist(), timeout_ms / 1000)
        except (OSError, EOFError, ValueError, PyMobileDevice3Exception) as e:
            logger.debug("recv_plist failed: %s", e)
            return None, _error_from_exception(e)
        return document, TransportError.SUCCESS

    def close(self) -> TransportError:
        try:
            _wait(self._loop, self._conn.close())
        except (OSError, PyMobileDevice3Exception) as e:
            logger.debug("close failed: %s", e)
            return _error_from_exception(e)
        return TransportError.SUCCESS


class UsbmuxDevice:
    """Device handle resolved through usbmuxd."""

    def __init__(self, udid: str, connection_type: str | None, loop: asyncio.AbstractEventLoop) -> None:
        self.udid = udid
        self._connection_type = connection_type
        self._loop = loop

    def start_service(self, name: str, label: str) -> UsbmuxService:
        """Handshake, start ``name`` (SSL included when the device asks for it), then drop the lockdown connection."""
        try:
            lockdown = _wait(
                self._loop, create_using_usbmux(serial=self.udid, label=label, connection_type=self._connection_type)
            )
        except (OSError, PyMobileDevice3Exception) as e:
            raise LockdownError(str(e) or type(e).__name__) from e

        try:
            conn = _wait(self._loop, lockdown.start_lockdown_service(name))
        except (OSError, PyMobileDevice3Exception) as e:
            raise ServiceStartError(str(e) or type(e).__name__) from e
        finally:
            _wait(self._loop, lockdown.close())

        return UsbmuxService(name=name, port=int(getattr(conn, "port", 0) or 0), connection=conn)

    def connect(self, service: ServiceDescriptor) -> UsbmuxSession:
        if not isinstance(service, UsbmuxService) or service.connection is None:
            raise TransportFailure(TransportError.INVALID_ARG, f"{service.name} was not started on this device")
        return UsbmuxSession(service.connection, self._loop)

    def close(self) -> None:
        if not self._loop.is_closed():
            self._loop.close()


class UsbmuxConnector:
    """Resolves devices over USB, or USB plus network when requested."""

    def open_device(self, udid: str | None, *, network: bool) -> UsbmuxDevice:
        connection_type = None if network else "USB"
        loop = asyncio.new_event_loop()
        try:
            mux_device = _wait(loop, select_device(udid, connection_type=connection_type))
        except (OSError, PyMobileDevice3Exception) as e:
            loop.close()
            raise DeviceNotFoundError(str(e) or udid or "") from e
        if mux_device is None:
            loop.close()
            raise DeviceNotFoundError(udid or "")
        return UsbmuxDevice(mux_device.serial, connection_type, loop)
