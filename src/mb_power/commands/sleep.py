"""Prevent system sleep."""

import typer

from mb_power.commands.assertion import send_assertion
from mb_power.power.protocol import AssertionType


def sleep(ctx: typer.Context) -> None:
    """Send sleep power assertion."""
    send_assertion(ctx, AssertionType.PREVENT_SYSTEM_SLEEP)
