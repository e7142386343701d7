"""CLI entry point for mb-power."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version
from pathlib import Path
from typing import Annotated

import typer

from mb_power.app_context import AppContext
from mb_power.commands.idle import idle
from mb_power.commands.sleep import sleep
from mb_power.commands.sync import sync
from mb_power.config import Config
from mb_power.log import setup_logging
from mb_power.output import Output

app = typer.Typer(
    name="mb-power",
    no_args_is_help=False,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
    if not value:
        return
    try:
        ver = package_version("mb-power")
    except PackageNotFoundError:
        ver = "unknown"
    typer.echo(f"mb-power {ver}")
    raise typer.Exit


def _udid_callback(value: str | None) -> str | None:
    if value is not None and not value:
        raise typer.BadParameter("UDID argument must not be empty.")
    return value


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    udid: Annotated[
        str | None, typer.Option("--udid", "-u", callback=_udid_callback, help="Target specific device by UDID.")
    ] = None,
    timeout: Annotated[
        int | None, typer.Option("--timeout", "-t", min=1, help="Timeout for assertion in seconds (default 60).")
    ] = None,
    network: Annotated[bool, typer.Option("--network", "-n", help="Connect to network device.")] = False,
    debug: Annotated[bool, typer.Option("--debug", "-d", help="Enable communication debugging.")] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path.")] = None,
    _version: Annotated[
        bool, typer.Option("--version", "-v", callback=_version_callback, is_eager=True, help="Print version information.")
    ] = False,
) -> None:
    """Send power assertion to device."""
    cfg = Config.build(data_dir)
    cfg.data_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(cfg.log_path, debug=debug)
    ctx.obj = AppContext(
        out=Output(json_mode=json_output),
        cfg=cfg,
        udid=udid,
        network=network,
        timeout=timeout if timeout is not None else cfg.default_timeout,
    )


app.command(help="Send wireless sync power assertion.")(sync)
app.command(help="Send user idle power assertion.")(idle)
app.command(help="Send sleep power assertion.")(sleep)
