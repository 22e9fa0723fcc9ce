"""
Startup diagnostics — runs once when the Flask app starts.

Checks the environment variables and Python packages the platform relies on
(Supabase, Microsoft Graph / MSAL, session secret) and logs a summary banner.
The same checks back ``flask check-env`` and ``scripts/check_env.py``.
"""

import importlib.util
import logging
import os
import re
import sys
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from venue_desk.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_SUPABASE_HOST_RE = re.compile(r"^https?://([a-z0-9-]+)\.supabase\.(?:co|in)/?", re.IGNORECASE)

MSAL_AUTHORITY_BASE = "https://login.microsoftonline.com"

# Repo-root .env, next to pyproject.toml
DEFAULT_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


def load_env_file(path=None) -> Path | None:
    """Load a .env file into os.environ without overriding variables already set.

    Returns the path that was loaded, or None when the file does not exist.
    """
    env_file = Path(path) if path else DEFAULT_ENV_FILE
    if not env_file.is_file():
        return None
    load_dotenv(env_file, override=False)
    return env_file


def check_env(names, environ=None) -> dict[str, bool]:
    """Map each variable name to whether it is set to a non-blank value."""
    env = os.environ if environ is None else environ
    return {name: bool((env.get(name) or "").strip()) for name in names}


def check_modules(names) -> dict[str, bool]:
    """Map each import name to whether it can be resolved (without importing it)."""
    results = {}
    for name in names:
        try:
            results[name] = importlib.util.find_spec(name) is not None
        except (ImportError, ValueError):
            results[name] = False
    return results


def supabase_project_ref(url: str | None) -> str | None:
    """Extract the project ref from ``https://<ref>.supabase.co``."""
    if not url:
        return None
    m = _SUPABASE_HOST_RE.match(url.strip())
    return m.group(1).lower() if m else None


def msal_authority(tenant_id: str | None) -> str | None:
    if not tenant_id:
        return None
    return f"{MSAL_AUTHORITY_BASE}/{tenant_id}"


def collect_report(required_env, required_modules, environ=None, env_file=None) -> dict:
    """Run every check and return a plain-dict report.

    ``env_file`` is the .env path already loaded (if any), reported as-is.
    """
    env = os.environ if environ is None else environ
    env_status = check_env(required_env, env)
    module_status = check_modules(required_modules)
    return {
        "env": env_status,
        "modules": module_status,
        "missing_env": [k for k, ok in env_status.items() if not ok],
        "missing_modules": [k for k, ok in module_status.items() if not ok],
        "supabase_ref": supabase_project_ref(env.get("SUPABASE_URL")),
        "msal_authority": msal_authority(env.get("AZURE_TENANT_ID")),
        "env_file": str(env_file) if env_file else None,
    }


def format_report(report: dict) -> list[str]:
    """Render a report as printable lines (CLI and script output)."""
    lines = []
    if report.get("env_file"):
        lines.append(f".env path loaded from: {report['env_file']}")
    lines.append("Environment Variable Check:")
    for name, ok in report["env"].items():
        lines.append(f"  {'OK     ' if ok else 'MISSING'}  {name}")
    lines.append("Dependency Check:")
    for name, ok in report["modules"].items():
        lines.append(f"  {'OK     ' if ok else 'MISSING'}  {name}")
    if report.get("supabase_ref"):
        lines.append(f"Supabase project: {report['supabase_ref']}")
    if report.get("msal_authority"):
        lines.append(f"MSAL authority: {report['msal_authority']}")
    if report["missing_env"] or report["missing_modules"]:
        lines.append("One or more required settings are missing.")
    else:
        lines.append("All required environment variables and packages are present.")
    return lines


def run_startup_diagnostics(app: Flask):
    """Run diagnostic checks during app startup.

    Raises:
        ConfigurationError: STRICT_STARTUP is on and environment variables are missing.
    """
    if app.config.get("TESTING"):
        return  # skip during tests for speed

    env_file = load_env_file(app.config.get("ENV_FILE"))
    if env_file:
        logger.info(".env path loaded from: %s", env_file)

    report = collect_report(
        app.config.get("REQUIRED_ENV_VARS", ()),
        app.config.get("REQUIRED_MODULES", ()),
        env_file=env_file,
    )

    py = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    env_name = os.getenv("APP_ENV", "development")
    mode = getattr(app.config.get("VIEW_STATE_MATCH_MODE"), "value",
                   app.config.get("VIEW_STATE_MATCH_MODE"))
    env_ok = len(report["env"]) - len(report["missing_env"])
    mod_ok = len(report["modules"]) - len(report["missing_modules"])

    banner = f"""
╔══════════════════════════════════════════════════════════════╗
║  Porirua Club Platform — Startup Diagnostics                 ║
╠══════════════════════════════════════════════════════════════╣
║  Python      : {py:<46s}║
║  Environment : {env_name:<46s}║
║  Debug       : {str(app.debug):<46s}║
║  View state  : {str(mode):<46s}║
║  Env vars    : {f'{env_ok}/{len(report["env"])} set':<46s}║
║  Packages    : {f'{mod_ok}/{len(report["modules"])} found':<46s}║
║  Supabase    : {report['supabase_ref'] or 'NOT SET':<46s}║
╚══════════════════════════════════════════════════════════════╝"""
    logger.info(banner)

    if report["msal_authority"]:
        logger.info("MSAL authority: %s", report["msal_authority"])

    for name in report["missing_env"]:
        logger.warning("  ⚠ %s is MISSING", name)
    for name in report["missing_modules"]:
        logger.warning("  ⚠ package %s not installed", name)

    if report["missing_env"] and app.config.get("STRICT_STARTUP"):
        raise ConfigurationError("Required environment variables are missing",
                                 missing=report["missing_env"])

    if not report["missing_env"] and not report["missing_modules"]:
        logger.info("✅ All startup checks passed")
