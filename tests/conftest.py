"""Shared fixtures: in-memory fakes of the device transport."""

import logging
from collections.abc import Callable, Iterator
from typing import Any

import pytest

from mb_power.transport import DeviceError, DeviceNotFoundError, ServiceDescriptor, TransportError, TransportFailure

ACK = {"Status": "Success"}


class FakeSession:
    """PlistSession that records traffic and replays scripted replies."""

    def __init__(
        self,
        *,
        send_error: TransportError | int = TransportError.SUCCESS,
        replies: list[tuple[dict[str, Any] | None, TransportError | int]] | None = None,
        close_error: TransportError | int = TransportError.SUCCESS,
    ) -> None:
        self.send_error = send_error
        self.replies = list(replies) if replies is not None else [(dict(ACK), TransportError.SUCCESS)]
        self.close_error = close_error
        self.sent: list[dict[str, Any]] = []
        self.receive_timeouts: list[int] = []
        self.close_calls = 0

    @property
    def touched(self) -> bool:
        return bool(self.sent or self.receive_timeouts or self.close_calls)

    def send_plist(self, document: dict[str, Any]) -> TransportError | int:
        self.sent.append(document)
        return self.send_error

    def receive_plist(self, timeout_ms: int) -> tuple[dict[str, Any] | None, TransportError | int]:
        self.receive_timeouts.append(timeout_ms)
        if not self.replies:
            return None, TransportError.RECEIVE_TIMEOUT
        return self.replies.pop(0)

    def close(self) -> TransportError | int:
        self.close_calls += 1
        return self.close_error


class FakeDevice:
    """Device handle that hands out a prepared session."""

    def __init__(
        self,
        session: FakeSession,
        *,
        udid: str = "00008030-000A1B2C3D4E5F60",
        start_error: DeviceError | None = None,
        connect_error: TransportFailure | None = None,
    ) -> None:
        self.udid = udid
        self.session = session
        self.start_error = start_error
        self.connect_error = connect_error
        self.started: list[tuple[str, str]] = []
        self.connected: list[ServiceDescriptor] = []
        self.close_calls = 0

    def start_service(self, name: str, label: str) -> ServiceDescriptor:
        self.started.append((name, label))
        if self.start_error is not None:
            raise self.start_error
        return ServiceDescriptor(name=name, port=49152)

    def connect(self, service: ServiceDescriptor) -> FakeSession:
        self.connected.append(service)
        if self.connect_error is not None:
            raise self.connect_error
        return self.session

    def close(self) -> None:
        self.close_calls += 1


class FakeConnector:
    """DeviceConnector returning one device, or none."""

    def __init__(self, device: FakeDevice | None) -> None:
        self.device = device
        self.lookups: list[tuple[str | None, bool]] = []

    def open_device(self, udid: str | None, *, network: bool) -> FakeDevice:
        self.lookups.append((udid, network))
        if self.device is None:
            raise DeviceNotFoundError(udid or "")
        return self.device


@pytest.fixture
def make_session() -> Callable[..., FakeSession]:
    """Factory for scripted sessions."""
    return FakeSession


@pytest.fixture
def make_device() -> Callable[..., FakeDevice]:
    """Factory for fake devices."""
    return FakeDevice


@pytest.fixture
def make_connector() -> Callable[..., FakeConnector]:
    """Factory for fake connectors."""
    return FakeConnector


@pytest.fixture
def session() -> FakeSession:
    """Session that acknowledges the first request."""
    return FakeSession()


@pytest.fixture
def device(session: FakeSession) -> FakeDevice:
    """Device wrapping the default session."""
    return FakeDevice(session)


@pytest.fixture
def connector(device: FakeDevice) -> FakeConnector:
    """Connector that resolves the default device."""
    return FakeConnector(device)


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Detach handlers installed by setup_logging so each test starts clean."""
    yield
    root = logging.getLogger("mb_power")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
