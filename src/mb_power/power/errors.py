"""Error domain of the power assertion service and its mapping from the transport domain."""

from enum import IntEnum

from mb_power.transport import TransportError


class PowerError(IntEnum):
    """Result codes returned by power client operations."""

    SUCCESS = 0
    INVALID_ARG = -1
    PLIST_ERROR = -2
    MUX_ERROR = -3
    SSL_ERROR = -4
    NOT_ENOUGH_DATA = -5
    TIMEOUT = -6
    UNKNOWN_ERROR = -256


class PowerClientError(Exception):
    """Raised when a power client cannot be constructed."""

    def __init__(self, code: PowerError, message: str = "") -> None:
        """Initialize with the power error code and an optional description.

        Args:
            code: Power service error code.
            message: Human-readable error description.

        """
        super().__init__(message or f"{code.name} ({int(code)})")
        self.code = code


def translate(err: TransportError | int) -> PowerError:
    """Map a transport error code to the power error domain.

    Codes outside the known transport domain map to ``UNKNOWN_ERROR``.
    """
    try:
        err = TransportError(err)
    except ValueError:
        return PowerError.UNKNOWN_ERROR

    match err:
        case TransportError.SUCCESS:
            return PowerError.SUCCESS
        case TransportError.INVALID_ARG:
            return PowerError.INVALID_ARG
        case TransportError.PLIST_ERROR:
            return PowerError.PLIST_ERROR
        case TransportError.MUX_ERROR:
            return PowerError.MUX_ERROR
        case TransportError.SSL_ERROR:
            return PowerError.SSL_ERROR
        case TransportError.NOT_ENOUGH_DATA:
            return PowerError.NOT_ENOUGH_DATA
        case TransportError.RECEIVE_TIMEOUT:
            return PowerError.TIMEOUT
        case _:
            return PowerError.UNKNOWN_ERROR
