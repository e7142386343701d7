"""Structured output for CLI and JSON modes."""

# ruff: noqa: T201 — this module is the output layer; print() is its sole mechanism for producing CLI output.

import json
import sys
from typing import Any, NoReturn

import typer


class Output:
    """Handles all CLI output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.

        """
        self._json_mode = json_mode

    def _success(self, data: dict[str, object], message: str) -> None:
        """Print a success result in JSON or human-readable format."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}, default=str))
        else:
            print(message)

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            print(f"Error: {message}", file=sys.stderr)
        raise typer.Exit(code=1)

    def print_assertion_done(self, assertion_type: str, timeout: int, response: dict[str, Any]) -> None:
        """Print assertion completion."""
        self._success(
            {"assertion_type": assertion_type, "timeout": timeout, "response": response},
            f"Power assertion {assertion_type} released.",
        )

    def print_holding(self, assertion_type: str, seconds: int) -> None:
        """Print hold notice to stderr. Suppressed in JSON mode to keep stdout a single envelope."""
        if not self._json_mode:
            print(f"Holding {assertion_type} for {seconds}s...", file=sys.stderr)
