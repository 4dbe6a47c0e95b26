"""
project_config -- single public entrypoint for runtime settings.

Responsibility:
    ``get_active_config()`` returns the ``HealthEngineConfig`` (database,
    loader, calendar sections).  YAML parsing lives in
    ``project_config.loader``.

Architecture position:
    Configuration sits above ``project_kernel`` and below
    ``project_services``.  The kernel and the engines MUST NEVER import
    from ``project_config``.

Resolution order:
    1. explicit ``path`` argument
    2. ``PROJECT_HEALTH_CONFIG`` environment variable
    3. ``project_config/sets/default.yaml``

    ``PROJECT_HEALTH_DATABASE_URL`` then overrides ``database.url``.

Failure modes:
    - ``FileNotFoundError`` -- the selected file does not exist.
    - ``InvalidConfigurationError`` -- a value fails validation.
"""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path

from project_config.loader import load_config_file, parse_config
from project_config.schema import (
    CalendarConfig,
    DatabaseConfig,
    HealthEngineConfig,
    LoaderConfig,
)
from project_kernel.logging_config import get_logger

logger = get_logger("config")

CONFIG_ENV_VAR = "PROJECT_HEALTH_CONFIG"
DATABASE_URL_ENV_VAR = "PROJECT_HEALTH_DATABASE_URL"

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(path: Path | str | None = None) -> HealthEngineConfig:
    """Load the active settings, applying environment overrides."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or _DEFAULT_CONFIG_PATH
    config = load_config_file(Path(path))

    url_override = os.environ.get(DATABASE_URL_ENV_VAR)
    if url_override:
        config = dataclasses.replace(
            config,
            database=dataclasses.replace(config.database, url=url_override),
        )

    logger.info(
        "config_loaded",
        extra={
            "config_source": config.source,
            "database_url_overridden": bool(url_override),
            "loader_max_workers": config.loader.max_workers,
            "loader_project_workers": config.loader.project_workers,
            "calendar_timezone": config.calendar.timezone,
        },
    )
    return config


__all__ = [
    "CONFIG_ENV_VAR",
    "CalendarConfig",
    "DATABASE_URL_ENV_VAR",
    "DatabaseConfig",
    "HealthEngineConfig",
    "LoaderConfig",
    "get_active_config",
    "parse_config",
]
