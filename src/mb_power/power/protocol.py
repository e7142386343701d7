"""Request documents of the assertion agent service.

Each request is a single plist dictionary:

    {"CommandKey": "CommandCreateAssertion",
     "AssertionTypeKey": "PreventSystemSleep",
     "AssertionNameKey": "mb-power",
     "AssertionTimeoutKey": 60,
     "AssertionDetailKey": "power update"}
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

SERVICE_NAME = "com.apple.mobile.assertion_agent"
COMMAND_CREATE_ASSERTION = "CommandCreateAssertion"
DEFAULT_DETAIL = "power update"


class AssertionType(StrEnum):
    """Power assertion types understood by the device."""

    WIRELESS_SYNC = "AMDPowerAssertionTypeWirelessSync"
    PREVENT_USER_IDLE_SLEEP = "PreventUserIdleSystemSleep"
    PREVENT_SYSTEM_SLEEP = "PreventSystemSleep"


@dataclass(frozen=True)
class AssertionRequest:
    """A create-assertion command."""

    assertion_type: AssertionType
    name: str
    timeout: int
    detail: str = DEFAULT_DETAIL

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            msg = f"Assertion timeout must be greater than 0, got {self.timeout}."
            raise ValueError(msg)

    def to_document(self) -> dict[str, Any]:
        """Build the plist dictionary sent to the device."""
        return {
            "CommandKey": COMMAND_CREATE_ASSERTION,
            "AssertionTypeKey": str(self.assertion_type),
            "AssertionNameKey": self.name,
            "AssertionTimeoutKey": self.timeout,
            "AssertionDetailKey": self.detail,
        }
