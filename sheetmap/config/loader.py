from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Configuration loader.

Responsibilities:
- Load the YAML config (default ``config/sheetmap.yml``)
- Validate it against ``config_schema.json`` shipped with the package
- Apply environment overrides and defaults
"""

__all__ = [
    "AppConfig",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "ENV_SPREADSHEET_ID",
    "ENV_WORKBOOK",
    "SCHEMA_PATH",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/sheetmap.yml")

ENV_SPREADSHEET_ID = "SHEETMAP_SPREADSHEET_ID"
ENV_WORKBOOK = "SHEETMAP_WORKBOOK"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class AppConfig:
    domain: str
    spreadsheet_id: str
    workbook: str | None
    sheets: tuple[str, ...] | None  # None = every sheet of the domain
    log_directory: str


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: The schema file is missing or invalid, or the data
            violates it.
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


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")

    _validate_config_schema(data)

    # Environment (typically loaded from .env) wins over the file.
    spreadsheet_id = os.getenv(ENV_SPREADSHEET_ID) or data.get("spreadsheet_id", "")
    workbook = os.getenv(ENV_WORKBOOK) or data.get("workbook")
    sheets = data.get("sheets")
    return AppConfig(
        domain=data["domain"],
        spreadsheet_id=spreadsheet_id,
        workbook=workbook,
        sheets=tuple(sheets) if sheets else None,
        log_directory=data.get("log_directory", "./logs"),
    )
