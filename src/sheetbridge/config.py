from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class BridgeConfig(BaseModel):
    """Process-wide configuration for sheetbridge."""

    log_level: str = Field(default="INFO", description="Logging level.")
    log_file: Path | None = Field(default=None, description="Optional log file path.")
    default_sheet_prefix: str = Field(
        default="Sheet", description="Prefix for auto-named worksheets."
    )
    install_fault_hook: bool = Field(
        default=True, description="Install the fault hook in start()."
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("default_sheet_prefix")
    @classmethod
    def _validate_prefix(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("default_sheet_prefix must not be blank.")
        return value

    @classmethod
    def from_env(cls) -> BridgeConfig:
        """Build a config from ``SHEETBRIDGE_*`` environment variables.

        Returns:
            Config with unset variables left at their defaults.
        """
        values: dict[str, object] = {}
        level = os.getenv("SHEETBRIDGE_LOG_LEVEL")
        if level:
            values["log_level"] = level
        log_file = os.getenv("SHEETBRIDGE_LOG_FILE")
        if log_file:
            values["log_file"] = Path(log_file)
        prefix = os.getenv("SHEETBRIDGE_SHEET_PREFIX")
        if prefix:
            values["default_sheet_prefix"] = prefix
        fault_hook = os.getenv("SHEETBRIDGE_FAULT_HOOK")
        if fault_hook:
            values["install_fault_hook"] = fault_hook.strip().lower() not in _FALSE_VALUES
        return cls.model_validate(values)


def configure_logging(config: BridgeConfig) -> None:
    """Configure logging for the host process.

    Args:
        config: Bridge configuration.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file is not None:
        handlers.append(logging.FileHandler(config.log_file))
    logging.basicConfig(
        level=config.log_level,
        handlers=handlers,
        format=_LOG_FORMAT,
    )
    logger.debug("Logging configured at %s.", config.log_level)


_active_config = BridgeConfig()


def get_config() -> BridgeConfig:
    """Return the config installed by ``start`` (defaults before that)."""
    return _active_config


def set_config(config: BridgeConfig) -> None:
    global _active_config
    _active_config = config
