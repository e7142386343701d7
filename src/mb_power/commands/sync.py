"""Hold a wireless sync assertion."""

import typer

from mb_power.commands.assertion import send_assertion
from mb_power.power.protocol import AssertionType


def sync(ctx: typer.Context) -> None:
    """Send wireless sync power assertion."""
    send_assertion(ctx, AssertionType.WIRELESS_SYNC)
