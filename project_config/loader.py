"""
Configuration Loader (``project_config.loader``).

Responsibility
--------------
Loads the YAML settings file and parses it into the frozen dataclasses of
``project_config.schema``.  Callers obtain configuration through
``project_config.get_active_config()``, not from here.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML, a top level that is not a mapping, wrong value types,
  unknown time zone, non-positive worker count
  -> ``InvalidConfigurationError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from project_kernel.exceptions import InvalidConfigurationError
from project_config.schema import (
    CalendarConfig,
    DatabaseConfig,
    HealthEngineConfig,
    LoaderConfig,
)


def load_yaml_file(path: Path) -> Any:
    """
    Load a single YAML file and return its parsed contents (empty -> {}).

    Raises:
        FileNotFoundError: if the file does not exist.
        InvalidConfigurationError: if the file contains invalid YAML.
    """
    with open(path) as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise InvalidConfigurationError(str(path), f"invalid YAML: {exc}") from exc


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise InvalidConfigurationError(name, "must be a mapping")
    return value


def _int(section: dict[str, Any], key: str, default: int, path: str) -> int:
    value = section.get(key, default)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigurationError(path, f"expected integer, got {value!r}")
    return value


def _bool(section: dict[str, Any], key: str, default: bool, path: str) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise InvalidConfigurationError(path, f"expected boolean, got {value!r}")
    return value


def parse_database(data: dict[str, Any]) -> DatabaseConfig:
    defaults = DatabaseConfig()
    url = data.get("url", defaults.url)
    if not isinstance(url, str) or not url:
        raise InvalidConfigurationError("database.url", "must be a non-empty string")
    return DatabaseConfig(
        url=url,
        echo=_bool(data, "echo", defaults.echo, "database.echo"),
        pool_size=_int(data, "pool_size", defaults.pool_size, "database.pool_size"),
        max_overflow=_int(
            data, "max_overflow", defaults.max_overflow, "database.max_overflow"
        ),
        pool_timeout=_int(
            data, "pool_timeout", defaults.pool_timeout, "database.pool_timeout"
        ),
        pool_recycle=_int(
            data, "pool_recycle", defaults.pool_recycle, "database.pool_recycle"
        ),
    )


def _workers(data: dict[str, Any], key: str, default: int) -> int:
    path = f"loader.{key}"
    value = _int(data, key, default, path)
    if value < 1:
        raise InvalidConfigurationError(path, "must be at least 1")
    return value


def parse_loader(data: dict[str, Any]) -> LoaderConfig:
    defaults = LoaderConfig()
    return LoaderConfig(
        max_workers=_workers(data, "max_workers", defaults.max_workers),
        project_workers=_workers(data, "project_workers", defaults.project_workers),
    )


def parse_calendar(data: dict[str, Any]) -> CalendarConfig:
    tz_name = data.get("timezone", CalendarConfig().timezone)
    if not isinstance(tz_name, str):
        raise InvalidConfigurationError("calendar.timezone", "must be a string")
    try:
        ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidConfigurationError(
            "calendar.timezone", f"unknown time zone {tz_name!r}"
        )
    return CalendarConfig(timezone=tz_name)


def parse_config(data: Any, source: str | None = None) -> HealthEngineConfig:
    """Parse a settings mapping into a ``HealthEngineConfig``."""
    if not isinstance(data, dict):
        raise InvalidConfigurationError(
            source or "<root>", f"top level must be a mapping, got {type(data).__name__}"
        )
    return HealthEngineConfig(
        database=parse_database(_section(data, "database")),
        loader=parse_loader(_section(data, "loader")),
        calendar=parse_calendar(_section(data, "calendar")),
        source=source,
    )


def load_config_file(path: Path) -> HealthEngineConfig:
    """Load and parse one settings file."""
    return parse_config(load_yaml_file(path), source=str(path))
