"""Centralized application configuration."""

import importlib
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

from mb_power.transport import DeviceConnector

DEFAULT_DATA_DIR = Path.home() / ".local" / "mb-power"
DEFAULT_BACKEND = "mb_power.usbmux:UsbmuxConnector"


class Config(BaseModel):
    """Application-wide configuration."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = Field(description="Base directory for all application data")
    default_timeout: int = Field(default=60, ge=1, description="Assertion timeout in seconds when --timeout is not given")
    label: str = Field(default="mb-power", min_length=1, description="Handshake label and assertion name")
    backend: str = Field(
        default=DEFAULT_BACKEND, pattern=r"^[\w.]+:\w+$", description="Device connector factory as 'module:attribute'"
    )

    @computed_field(description="Optional TOML configuration file")
    @property
    def config_path(self) -> Path:
        """Optional TOML configuration file."""
        return self.data_dir / "config.toml"

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.data_dir / "power.log"

    @staticmethod
    def build(data_dir: Path | None = None) -> "Config":
        """Build a Config from defaults and optional config.toml."""
        resolved_dir = data_dir if data_dir is not None else DEFAULT_DATA_DIR
        config_path = resolved_dir / "config.toml"

        kwargs: dict[str, Any] = {"data_dir": resolved_dir}
        if config_path.is_file():
            with config_path.open("rb") as f:
                toml_data = tomllib.load(f)
            if isinstance(toml_data.get("default_timeout"), int):
                kwargs["default_timeout"] = toml_data["default_timeout"]
            for key in ("label", "backend"):
                if isinstance(toml_data.get(key), str):
                    kwargs[key] = toml_data[key]

        return Config(**kwargs)


def load_connector(backend: str) -> DeviceConnector:
    """Import and instantiate a device connector from a 'module:attribute' path.

    Raises:
        ImportError: The module or attribute does not exist.

    """
    module_name, _, attr = backend.partition(":")
    module = importlib.import_module(module_name)
    try:
        factory = getattr(module, attr)
    except AttributeError as e:
        msg = f"{module_name} has no attribute {attr!r}"
        raise ImportError(msg) from e
    connector: DeviceConnector = factory()
    return connector
