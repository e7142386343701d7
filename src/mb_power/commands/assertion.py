"""Shared implementation of the assertion commands."""

import logging

import typer

from mb_power.app_context import use_context
from mb_power.config import load_connector
from mb_power.driver import AssertionDriver
from mb_power.power.protocol import AssertionType

logger = logging.getLogger(__name__)


def send_assertion(ctx: typer.Context, assertion_type: AssertionType) -> None:
    """Create an assertion on the device, hold it, then release it."""
    app = use_context(ctx)
    try:
        connector = load_connector(app.cfg.backend)
    except ImportError as e:
        logger.exception("Failed to load device backend %s", app.cfg.backend)
        app.out.print_error_and_exit("backend_unavailable", f"Could not load device backend '{app.cfg.backend}': {e}")

    driver = AssertionDriver(
        connector,
        label=app.cfg.label,
        on_hold=app.out.print_holding,
        logger=logging.getLogger("mb_power.driver"),
    )
    result = driver.run(assertion_type, udid=app.udid, network=app.network, timeout=app.timeout)
    if not result.ok:
        app.out.print_error_and_exit(result.error, result.message)
    app.out.print_assertion_done(assertion_type, app.timeout, result.response)
