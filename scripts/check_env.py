#!/usr/bin/env python3
"""
Environment diagnostics.

Prints which required environment variables and packages are present,
without starting the application.

Usage:
    python scripts/check_env.py
    python scripts/check_env.py --env production
    python scripts/check_env.py --var EXTRA_KEY --var OTHER_KEY
    python scripts/check_env.py --env-file deploy/.env.staging
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from venue_desk.config import config  # noqa: E402
from venue_desk.middleware.diagnostics import (  # noqa: E402
    collect_report,
    format_report,
    load_env_file,
)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Check required environment variables and packages."
    )
    parser.add_argument(
        "--env",
        default=os.getenv("APP_ENV", "development"),
        choices=sorted(config),
        help="Configuration whose requirements are checked",
    )
    parser.add_argument(
        "--var",
        action="append",
        default=[],
        help="Additional environment variable to require (repeatable)",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help=".env file to load first (default: ENV_FILE or the repo-root .env)",
    )
    args = parser.parse_args(argv)

    cfg = config[args.env]
    required_env = list(cfg.REQUIRED_ENV_VARS) + [v for v in args.var if v not in cfg.REQUIRED_ENV_VARS]
    env_file = load_env_file(args.env_file or cfg.ENV_FILE)
    report = collect_report(required_env, cfg.REQUIRED_MODULES, env_file=env_file)

    for line in format_report(report):
        print(line)

    if report["missing_env"] or report["missing_modules"]:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
