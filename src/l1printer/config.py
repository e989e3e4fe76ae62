"""Configuration management for l1printer.

Values are resolved in this order, later sources winning:
defaults, ``config.yaml``, environment / ``.env``, command line flags.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from l1printer.models.printer import ImageDimensions, PrinterConfig

logger = logging.getLogger(__name__)

PRINTER_FIELDS = ("port_path", "baud_rate", "packet_size", "exit_delay", "packet_delay", "firmware_timeout")


class AppConfig(BaseModel):
    """Application configuration loaded from config.yaml."""

    printer: PrinterConfig = Field(default_factory=PrinterConfig)
    dimensions: ImageDimensions = Field(default_factory=ImageDimensions)
    templates_dir: Path = Path("./templates")
    # Where debug snapshots are written
    output_dir: Path = Path(".")
    debug: bool = False
    verbose: bool = False


class Settings(BaseSettings):
    """Environment-based settings.

    Unset values leave the YAML (or default) configuration untouched.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    config_file: Path = Path("config.yaml")
    port_path: str | None = None
    baud_rate: int | None = None
    packet_size: int | None = None
    exit_delay: int | None = None
    packet_delay: int | None = None
    firmware_timeout: int | None = None
    printer_dpi: int | None = None
    debug_mode: bool | None = None
    verbose_logging: bool | None = None
    templates_dir: Path | None = None
    output_dir: Path | None = None

    def as_overrides(self) -> dict[str, Any]:
        """Settings under the names used by ``resolve_config`` overrides."""
        return {
            **{name: getattr(self, name) for name in PRINTER_FIELDS},
            "dpi": self.printer_dpi,
            "debug": self.debug_mode,
            "verbose": self.verbose_logging,
            "templates_dir": self.templates_dir,
            "output_dir": self.output_dir,
        }


def load_config(config_path: Path) -> AppConfig:
    """Load application configuration from YAML file."""
    if not config_path.exists():
        return AppConfig()

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    # Handle None values for nested sections (YAML returns None for empty keys)
    for section in ("printer", "dimensions"):
        if data.get(section) is None:
            data.pop(section, None)

    return AppConfig.model_validate(data)


def apply_overrides(config: AppConfig, overrides: dict[str, Any]) -> AppConfig:
    """Return a copy of ``config`` with every non-None override applied.

    Override keys are the printer field names plus ``dpi``, ``debug``,
    ``verbose``, ``templates_dir`` and ``output_dir``.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    if not values:
        return config

    printer = config.printer.model_dump()
    printer.update({key: values[key] for key in PRINTER_FIELDS if key in values})

    dimensions = config.dimensions.model_dump()
    if "dpi" in values:
        dimensions["dpi"] = values["dpi"]

    data = config.model_dump()
    data.update({key: values[key] for key in ("debug", "verbose", "templates_dir", "output_dir") if key in values})
    data["printer"] = printer
    data["dimensions"] = dimensions
    return AppConfig.model_validate(data)


def resolve_config(
    settings: Settings | None = None,
    overrides: dict[str, Any] | None = None,
    config_file: Path | None = None,
) -> AppConfig:
    """Build the effective configuration from all sources.

    Args:
        settings: Environment settings; read from the environment if omitted.
        overrides: Command line values (None entries are ignored).
        config_file: YAML file to use instead of ``settings.config_file``.

    Raises:
        pydantic.ValidationError: If the merged values are invalid.
    """
    settings = settings or Settings()
    path = config_file or settings.config_file
    config = load_config(path)
    if path.exists():
        logger.debug(f"Loaded configuration from {path}")

    config = apply_overrides(config, settings.as_overrides())
    return apply_overrides(config, overrides or {})
