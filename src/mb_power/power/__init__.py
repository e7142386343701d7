"""Assertion agent service: client, request documents, and error codes."""

from mb_power.power.client import PowerClient as PowerClient
from mb_power.power.client import Received as Received
from mb_power.power.errors import PowerClientError as PowerClientError
from mb_power.power.errors import PowerError as PowerError
from mb_power.power.protocol import AssertionRequest as AssertionRequest
from mb_power.power.protocol import AssertionType as AssertionType
