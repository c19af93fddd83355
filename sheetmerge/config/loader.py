from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.template_config import TemplateConfig, TemplateConfigError

"""Template config loader.

Responsibilities:
- Load a YAML mapping of template geometry keys
- Validate it against template_config_schema.json
- Fill missing keys from the default geometry

Example file::

    company_row: 0
    company_col: 1
    code_row: 1
    code_col: 1
    data_start_row: 3
    left_table_start_col: 0
    right_table_start_col: 4
    col_count: 3
"""

__all__ = [
    "ConfigError",
    "SCHEMA_PATH",
    "load_template_config",
]

SCHEMA_PATH = Path(__file__).with_name("template_config_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: the schema file is missing or broken, or the data fails validation
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


def load_template_config(path: Path) -> TemplateConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    try:
        return TemplateConfig.from_mapping(data)
    except TemplateConfigError as e:  # pragma: no cover (schema catches these first)
        raise ConfigError(str(e)) from e
