"""Application configuration loader."""

import logging
import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "scopeconf.yaml"
DEFAULT_CONFIG_DIR = Path("config")


class AppConfig(BaseModel):
    """scopeconf settings."""
    store_file: Path = Path("settings.yaml")
    page_size: int = Field(default=16, ge=1)
    alert_seconds: float = Field(default=2.0, ge=0)
    alert_acknowledge: bool = False  # Key press ends an alert early
    product_name: str = "scopeconf"
    auto_save: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: Optional[Path] = None  # None = <store dir>/scopeconf.log during UI sessions


def _expand_env_vars(obj):
    """Recursively expand ${VAR} patterns in strings."""
    if isinstance(obj, str):
        if obj.startswith("${") and obj.endswith("}"):
            return os.environ.get(obj[2:-1], "")
        return obj
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    return obj


def load_config(
    config_dir: Optional[Path] = None,
    env_path: Optional[Path] = None,
) -> AppConfig:
    """Load configuration from YAML and the environment.

    Args:
        config_dir: Directory holding scopeconf.yaml (default: config/).
        env_path: Path to a .env file (default: .env).

    Returns:
        The loaded AppConfig. Defaults are used if the file is missing.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values.
    """
    if env_path is None:
        env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)

    config_dir = config_dir or DEFAULT_CONFIG_DIR
    config_path = config_dir / CONFIG_FILENAME

    data = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read {config_path}: {e}", {"path": str(config_path)}) from e
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a mapping", {"path": str(config_path)})
        logger.debug(f"Loaded config from {config_path}")
    else:
        logger.debug(f"No config file at {config_path}, using defaults")

    data = _expand_env_vars(data)
    # An unset ${VAR} leaves the field at its default
    data = {k: v for k, v in data.items() if v != ""}

    try:
        return AppConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e
