"""Prevent idle sleep."""

import typer

from mb_power.commands.assertion import send_assertion
from mb_power.power.protocol import AssertionType


def idle(ctx: typer.Context) -> None:
    """Send user idle power assertion."""
    send_assertion(ctx, AssertionType.PREVENT_USER_IDLE_SLEEP)
