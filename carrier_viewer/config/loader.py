from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..services.engine import DEFAULT_NOMINAL_COUNT
from ..services.fetcher import DEFAULT_BASE_URL

"""Config loader.

Responsibilities:
- Load YAML config (default ``config/viewer.yml``)
- Validate against the bundled ``config_schema.json``
- Apply defaults (built-in dataset, 10 rows per page, no timeout)
- Apply ``CARRIER_VIEWER_*`` environment overrides
"""

__all__ = [
    "ConfigError",
    "ViewerConfig",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_SPREADSHEET_ID",
    "load_config",
]

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/viewer.yml")

DEFAULT_SPREADSHEET_ID = "1hB_LjBT9ezZigXnC-MblT2PXZledkZqBnvV23ssfSuE"
DEFAULT_PAGE_SIZE = 10

ENV_SPREADSHEET_ID = "CARRIER_VIEWER_SPREADSHEET_ID"
ENV_BASE_URL = "CARRIER_VIEWER_BASE_URL"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ViewerConfig:
    spreadsheet_id: str = DEFAULT_SPREADSHEET_ID
    base_url: str = DEFAULT_BASE_URL
    page_size: int = DEFAULT_PAGE_SIZE
    nominal_count: int = DEFAULT_NOMINAL_COUNT
    timeout_seconds: float | None = None


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file unreadable or the data violates the schema
            (missing required keys, wrong types, unknown keys)
    """
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    try:
        jsonschema.validate(data, schema)
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _env_overrides() -> dict[str, Any]:
    """``CARRIER_VIEWER_*`` values that win over the file (unset or empty: ignored)."""
    overrides: dict[str, Any] = {}
    if os.getenv(ENV_SPREADSHEET_ID):
        overrides["spreadsheet_id"] = os.environ[ENV_SPREADSHEET_ID]
    if os.getenv(ENV_BASE_URL):
        overrides["base_url"] = os.environ[ENV_BASE_URL]
    return overrides


def load_config(path: Path = DEFAULT_CONFIG_PATH, *, required: bool = False) -> ViewerConfig:
    """Load configuration from ``path``.

    A missing file yields the defaults unless ``required`` is set (the user
    named the file explicitly), in which case it is an error. Environment
    overrides are merged before schema validation, so they are checked the
    same way as file values.
    """
    if not path.exists():
        if required:
            raise ConfigError(f"config file not found: {path}")
        data: Any = {"spreadsheet_id": DEFAULT_SPREADSHEET_ID}
    else:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("config root must be a mapping")

    data = {**data, **_env_overrides()}
    _validate_config_schema(data)

    return ViewerConfig(
        spreadsheet_id=data["spreadsheet_id"],
        base_url=data.get("base_url", DEFAULT_BASE_URL),
        page_size=data.get("page_size", DEFAULT_PAGE_SIZE),
        nominal_count=data.get("nominal_count", DEFAULT_NOMINAL_COUNT),
        timeout_seconds=data.get("timeout_seconds"),
    )
