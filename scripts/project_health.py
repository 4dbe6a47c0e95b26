#!/usr/bin/env python3
"""
Print the live health of one project as JSON.

The result is computed from the current database state on every run;
nothing is written back.

Usage:
  python3 scripts/project_health.py 3f0c9a2e-6d1b-4b8e-9a51-2c7d0e4f8a10 \\
    [--config settings.yaml] [--database-url sqlite:///local.db] [--strict]

Exit codes:
  0  health printed (including the fallback for an unknown project)
  1  configuration error
  2  --strict and the project was not found or could not be read
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from pathlib import Path

from project_config import get_active_config
from project_kernel.db.engine import get_session_factory, init_engine_from_url
from project_kernel.exceptions import ConfigurationError
from project_kernel.logging_config import configure_logging
from project_services import ProjectHealthService


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Compute the health of one project.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("project_id", help="Project UUID")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML (default: PROJECT_HEALTH_CONFIG or built-in defaults)",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Override database.url from the settings file",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 instead of printing the not-found fallback",
    )
    args = parser.parse_args(argv)

    configure_logging()

    try:
        config = get_active_config(args.config)
    except (ConfigurationError, FileNotFoundError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.database_url:
        config = dataclasses.replace(
            config,
            database=dataclasses.replace(config.database, url=args.database_url),
        )

    db = config.database
    init_engine_from_url(
        db.url,
        echo=db.echo,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_timeout=db.pool_timeout,
        pool_recycle=db.pool_recycle,
    )
    service = ProjectHealthService.from_config(config, get_session_factory())

    if args.strict:
        lookup = service.evaluate(args.project_id)
        if lookup.health is None:
            print(
                f"ERROR: {lookup.error_code}: {args.project_id}",
                file=sys.stderr,
            )
            return 2
        health = lookup.health
    else:
        health = service.compute_health(args.project_id)

    print(json.dumps(health.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
