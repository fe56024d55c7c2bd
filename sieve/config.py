"""
Configuration loading and validation for Sieve.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError


class FilterConfig(BaseModel):
    """Configuration for one filter in the chain."""
    type: str  # "contains", ...
    config: dict[str, Any] = Field(default_factory=dict)  # Type-specific configuration


class LoggingConfig(BaseModel):
    """Logging settings, overridable from the command line."""
    level: str = "INFO"
    file: str | None = None


class Config(BaseModel):
    """Main configuration for a Sieve pipeline."""
    filters: list[FilterConfig] = Field(..., min_length=1)
    workers: int = Field(default=1, ge=1)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: str | Path) -> Config:
    """
    Load and validate configuration from YAML file.

    Filter options are only checked for shape here; each filter validates
    its own options when it is created.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Validated Config object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
        yaml.YAMLError: If YAML parsing fails
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with path.open('r', encoding='utf-8') as f:
        raw_config: dict[str, Any] = yaml.safe_load(f)

    try:
        return Config.model_validate(raw_config)
    except ValidationError as e:
        raise ValueError(f"Configuration validation error: {e}") from e
