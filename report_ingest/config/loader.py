from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load the YAML config (config/ingest.yml by default)
- Validate it against schema.json (required keys, types, no unknown keys)
- Apply defaults for optional keys
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "IngestConfig",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("schema.json")
DEFAULT_CONFIG_PATH = Path("config/ingest.yml")

DEFAULT_EXTENSIONS = [".xlsx", ".xls"]
DEFAULT_KEEP_NA_STRINGS = ["NA", "N/A", "null"]
DEFAULT_ERROR_LOG_DIR = "logs"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class IngestConfig:
    source_directory: str
    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    # Strings pandas would turn into NaN but that are real values in the reports
    keep_na_strings: list[str] = field(default_factory=lambda: list(DEFAULT_KEEP_NA_STRINGS))
    error_log_dir: str = DEFAULT_ERROR_LOG_DIR


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Args:
        data: Configuration data to validate

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails validation (missing required keys, wrong types,
            unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> IngestConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    return IngestConfig(
        source_directory=data["source_directory"],
        extensions=[e.lower() for e in data.get("extensions", DEFAULT_EXTENSIONS)],
        keep_na_strings=list(data.get("keep_na_strings", DEFAULT_KEEP_NA_STRINGS)),
        error_log_dir=data.get("error_log_dir", DEFAULT_ERROR_LOG_DIR),
    )
