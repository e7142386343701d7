"""Application context shared across CLI commands."""

from dataclasses import dataclass

import typer

from mb_power.config import Config
from mb_power.output import Output


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared application state passed through Typer context."""

    out: Output
    cfg: Config
    udid: str | None
    network: bool
    timeout: int


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result
