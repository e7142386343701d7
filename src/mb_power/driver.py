"""One power assertion run: connect, send, await the acknowledgement, hold, release."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from mb_power.power.client import PowerClient
from mb_power.power.errors import PowerClientError, PowerError
from mb_power.power.protocol import SERVICE_NAME, AssertionRequest, AssertionType
from mb_power.transport import (
    Device,
    DeviceConnector,
    DeviceError,
    DeviceNotFoundError,
    LockdownError,
    ServiceStartError,
)

# Headroom left before the assertion would lapse on the device.
# Heuristic only: the device's actual expiry rule is undocumented.
HOLD_MARGIN = 10


def hold_seconds(timeout: int) -> int:
    """Seconds to keep the assertion open for a requested ``timeout``."""
    if timeout > HOLD_MARGIN:
        return timeout - HOLD_MARGIN
    return timeout


@dataclass(frozen=True)
class AssertionResult:
    """Outcome envelope of a run."""

    ok: bool
    error: str = ""
    message: str = ""
    response: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def success(response: dict[str, Any]) -> "AssertionResult":
        """Build a success result."""
        return AssertionResult(ok=True, response=response)

    @staticmethod
    def fail(error: str, message: str) -> "AssertionResult":
        """Build an error result."""
        return AssertionResult(ok=False, error=error, message=message)


class AssertionDriver:
    """Drives a PowerClient through a single assertion."""

    def __init__(
        self,
        connector: DeviceConnector,
        *,
        label: str,
        sleep: Callable[[float], None] | None = None,
        on_hold: Callable[[AssertionType, int], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            connector: Device/service-discovery collaborator.
            label: Label sent during the handshake; also used as the assertion name.
            sleep: Blocking sleep used for the hold; defaults to time.sleep.
            on_hold: Called with the assertion type and hold duration just before the hold starts.
            logger: Sink for progress and debug tracing.

        """
        self._connector = connector
        self._label = label
        self._sleep = sleep or time.sleep
        self._on_hold = on_hold
        self._log = logger or logging.getLogger(__name__)

    def run(self, assertion_type: AssertionType, *, udid: str | None, network: bool, timeout: int) -> AssertionResult:
        """Create the assertion and hold it for roughly ``timeout`` seconds.

        Every resource acquired is released before returning, whatever the outcome.
        """
        request = AssertionRequest(assertion_type=assertion_type, name=self._label, timeout=timeout)

        try:
            device = self._connector.open_device(udid, network=network)
        except DeviceError as e:
            self._log.info("Device lookup failed: %s", e)
            if udid:
                return AssertionResult.fail(DeviceNotFoundError.code, f"No device found with udid {udid}.")
            return AssertionResult.fail(DeviceNotFoundError.code, "No device found.")

        try:
            return self._run_on_device(device, request)
        finally:
            device.close()

    def _run_on_device(self, device: Device, request: AssertionRequest) -> AssertionResult:
        """Start the service, connect, and perform the exchange and hold."""
        try:
            client = PowerClient.start(device, self._label, logger=self._log)
        except DeviceError as e:
            self._log.info("Could not start %s on %s: %s", SERVICE_NAME, device.udid, e)
            return AssertionResult.fail(e.code, self._describe_device_error(e))
        except PowerClientError as e:
            self._log.info("Could not connect to %s on %s: %s", SERVICE_NAME, device.udid, e)
            return AssertionResult.fail("connect_failed", "Could not connect to power!")

        with client:
            result = self._exchange(client, request)
            seconds = hold_seconds(request.timeout)
            self._log.info("Holding %s for %ds", request.assertion_type, seconds)
            if self._on_hold is not None:
                self._on_hold(request.assertion_type, seconds)
            self._sleep(seconds)
        return result

    def _exchange(self, client: PowerClient, request: AssertionRequest) -> AssertionResult:
        """Send the request and wait for the acknowledgement."""
        err = client.send(request.to_document())
        if err != PowerError.SUCCESS:
            return AssertionResult.fail("send_failed", f"Could not send power assertion: {int(err)}")

        received = client.receive()
        if not received.ok or received.document is None:
            return AssertionResult.fail("receive_failed", f"Could not receive power assertion: {int(received.error)}")

        self._log.debug("Assertion acknowledged: %s", received.document)
        return AssertionResult.success(received.document)

    @staticmethod
    def _describe_device_error(e: DeviceError) -> str:
        match e:
            case LockdownError():
                return f"Could not connect to lockdownd: {e}"
            case ServiceStartError():
                return f"Could not start power agent service: {e}"
            case _:
                return str(e)
