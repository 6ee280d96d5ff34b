"""Engine configuration loaded from YAML and validated with jsonschema."""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from jsonschema import validate, ValidationError

from .errors import ConfigError

CONFIG_ENV_VAR = "MAINTCAL_CONFIG"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "concurrencyLimit": {"type": "integer", "minimum": 1},
        "fetchTimeoutSeconds": {"type": "number", "exclusiveMinimum": 0},
        "debounceSeconds": {"type": "number", "minimum": 0},
        "logLevel": {
            "type": "string",
            "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        },
        "dataFile": {"type": "string"},
    },
    "additionalProperties": False,
}


@dataclass
class EngineConfig:
    """Tunables for the population pipeline."""

    concurrency_limit: int = 3
    fetch_timeout_seconds: float = 30.0
    debounce_seconds: float = 0.0
    log_level: str = "INFO"
    data_file: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "EngineConfig":
        """Build from the camelCase YAML mapping; relative dataFile resolves against base_dir."""
        try:
            validate(instance=data, schema=CONFIG_SCHEMA)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e.message}") from e

        config = cls()
        if "concurrencyLimit" in data:
            config.concurrency_limit = data["concurrencyLimit"]
        if "fetchTimeoutSeconds" in data:
            config.fetch_timeout_seconds = float(data["fetchTimeoutSeconds"])
        if "debounceSeconds" in data:
            config.debounce_seconds = float(data["debounceSeconds"])
        if "logLevel" in data:
            config.log_level = data["logLevel"]
        if "dataFile" in data:
            data_file = Path(data["dataFile"])
            if base_dir is not None and not data_file.is_absolute():
                data_file = base_dir / data_file
            config.data_file = data_file
        return config


def load_config(filename: Optional[Union[str, Path]] = None) -> EngineConfig:
    """
    Load configuration from a YAML file.

    Falls back to the MAINTCAL_CONFIG environment variable, then to defaults
    when neither names a file.
    """
    if filename is None:
        filename = os.environ.get(CONFIG_ENV_VAR)
    if not filename:
        return EngineConfig()

    path = Path(filename)
    try:
        with open(path) as fp:
            data = yaml.safe_load(fp) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read configuration {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration {path} must be a mapping")
    return EngineConfig.from_dict(data, base_dir=path.parent)


def setup_logging(level: str = "INFO") -> None:
    """Send engine logs to stderr at the given level."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("maintcal")
    root.handlers = [handler]
    root.setLevel(level)
