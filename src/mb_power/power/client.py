"""Synchronous client for the device's assertion agent service."""

import logging
from dataclasses import dataclass, field
from typing import Any, Self

from mb_power.power.errors import PowerClientError, PowerError, translate
from mb_power.power.protocol import SERVICE_NAME
from mb_power.transport import Device, PlistSession, TransportFailure

DEFAULT_RECEIVE_TIMEOUT_MS = 1000


@dataclass(frozen=True)
class Received:
    """Outcome of a receive: the document on success, otherwise the error code."""

    error: PowerError
    document: dict[str, Any] | None = field(default=None)

    @property
    def ok(self) -> bool:
        """Whether a document was received."""
        return self.error == PowerError.SUCCESS

    @staticmethod
    def success(document: dict[str, Any]) -> "Received":
        """Build a successful result."""
        return Received(error=PowerError.SUCCESS, document=document)

    @staticmethod
    def fail(error: PowerError) -> "Received":
        """Build a failed result. Never carries a document."""
        return Received(error=error)


class PowerClient:
    """Sends and receives plist documents over an exclusively owned session."""

    def __init__(self, session: PlistSession, *, logger: logging.Logger | None = None) -> None:
        """Wrap an open session. Prefer ``PowerClient.new``, which validates arguments.

        Args:
            session: Open property-list session, owned by the client from now on.
            logger: Sink for debug tracing; defaults to this module's logger.

        """
        self._session: PlistSession | None = session
        self._log = logger or logging.getLogger(__name__)

    @classmethod
    def new(cls, session: PlistSession | None, *, logger: logging.Logger | None = None) -> Self:
        """Create a client around an already-open session.

        Raises:
            PowerClientError: ``session`` is None (code: ``INVALID_ARG``).

        """
        log = logger or logging.getLogger(__name__)
        if session is None:
            log.debug("Incorrect parameter passed to PowerClient.new.")
            raise PowerClientError(PowerError.INVALID_ARG, "Session must not be None.")
        client = cls(session, logger=log)
        log.debug("Power client created.")
        return client

    @classmethod
    def start(cls, device: Device, label: str, *, logger: logging.Logger | None = None) -> Self:
        """Start the assertion agent service on ``device`` and connect to it.

        Raises:
            DeviceError: Handshake or service start failed (propagated unchanged).
            PowerClientError: Connecting to the started service failed (translated code).

        """
        service = device.start_service(SERVICE_NAME, label)
        try:
            session = device.connect(service)
        except TransportFailure as e:
            code = translate(e.code)
            (logger or logging.getLogger(__name__)).debug("Creating a property list client failed. Error: %d", code)
            raise PowerClientError(code, str(e)) from e
        return cls.new(session, logger=logger)

    @property
    def is_open(self) -> bool:
        """Whether the client still owns its session."""
        return self._session is not None

    def free(self) -> PowerError:
        """Close the owned session and release the client.

        Returns ``INVALID_ARG`` when the client was already freed.
        """
        session = self._session
        if session is None:
            return PowerError.INVALID_ARG
        self._session = None
        return translate(session.close())

    def send(self, document: dict[str, Any] | None) -> PowerError:
        """Send a plist document. Failed sends are not retried."""
        if self._session is None or document is None:
            return PowerError.INVALID_ARG

        res = translate(self._session.send_plist(document))
        if res != PowerError.SUCCESS:
            self._log.debug("Sending plist failed with error %d", res)
            return res

        self._log.debug("Sent: %s", document)
        return res

    def receive(self, timeout_ms: int = DEFAULT_RECEIVE_TIMEOUT_MS) -> Received:
        """Wait up to ``timeout_ms`` milliseconds for one plist document.

        A transport that reports success without a document yields ``MUX_ERROR``.
        Documents that arrive alongside an error are dropped.
        """
        if self._session is None:
            return Received.fail(PowerError.INVALID_ARG)

        document, err = self._session.receive_plist(timeout_ms)
        res = translate(err)
        if res == PowerError.SUCCESS and document is None:
            res = PowerError.MUX_ERROR
        if res != PowerError.SUCCESS:
            self._log.debug("Could not receive plist, error %d", res)
            return Received.fail(res)

        self._log.debug("Received: %s", document)
        return Received.success(document)

    def receive_with_timeout(self, timeout_ms: int) -> Received:
        """Alias of ``receive`` with a mandatory timeout."""
        return self.receive(timeout_ms)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: object) -> None:
        if self._session is not None:
            self.free()
