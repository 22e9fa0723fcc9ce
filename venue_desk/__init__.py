"""
Porirua Club Platform
Flask Application Factory.

Usage:
    from venue_desk import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask, request
from flask_cors import CORS

from venue_desk.config import config
from venue_desk.middleware.logging_config import configure_logging
from venue_desk.middleware.timing import init_request_timing
from venue_desk.middleware.view_state import init_view_state
from venue_desk.middleware.diagnostics import (
    collect_report,
    format_report,
    load_env_file,
    run_startup_diagnostics,
)

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.

    Raises:
        ConfigurationError: production without SECRET_KEY, an invalid
            VIEW_STATE_MATCH_MODE, or missing env vars under STRICT_STARTUP.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name]())

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins == "*":
        CORS(app)
    elif cors_origins:
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        logger.info("CORS disabled (CORS_ORIGINS empty)")

    # ── Request timing middleware ────────────────────────────────────────
    init_request_timing(app)

    # ── View state (page_type / active_tab for templates) ────────────────
    init_view_state(app)

    # ── Blueprints ───────────────────────────────────────────────────────
    from venue_desk.blueprints import ALL_BLUEPRINTS
    for bp in ALL_BLUEPRINTS:
        app.register_blueprint(bp)

    # ── CLI commands ─────────────────────────────────────────────────────
    _register_cli(app)

    # ── Error handlers ───────────────────────────────────────────────────
    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith("/api/"):
            return {"error": "Not found", "path": request.path}, 404
        return "<h1>404 — Not Found</h1>", 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        if request.path.startswith("/api/"):
            return {"error": "Internal server error"}, 500
        return "<h1>500 — Internal Server Error</h1><p>An unexpected error occurred.</p>", 500

    # ── Startup diagnostics ──────────────────────────────────────────────
    run_startup_diagnostics(app)

    return app


def _register_cli(app):
    from venue_desk.services.view_state import MatchMode, classify

    @app.cli.command("classify-path")
    @click.argument("path")
    @click.option(
        "--mode",
        type=click.Choice([m.value for m in MatchMode]),
        default=None,
        help="Keyword matching mode (defaults to VIEW_STATE_MATCH_MODE).",
    )
    def classify_path_cmd(path, mode):
        """Print the page_type / active_tab a request path resolves to."""
        state = classify(path, mode or app.config["VIEW_STATE_MATCH_MODE"])
        click.echo(f"page_type={state.page_type.value} active_tab={state.active_tab.value}")

    @app.cli.command("check-env")
    @click.option(
        "--env-file",
        type=click.Path(dir_okay=False),
        default=None,
        help=".env file to load first (defaults to ENV_FILE or the repo-root .env).",
    )
    def check_env_cmd(env_file):
        """Check required environment variables and packages."""
        loaded = load_env_file(env_file or app.config.get("ENV_FILE"))
        report = collect_report(
            app.config.get("REQUIRED_ENV_VARS", ()),
            app.config.get("REQUIRED_MODULES", ()),
            env_file=loaded,
        )
        for line in format_report(report):
            click.echo(line)
        if report["missing_env"] or report["missing_modules"]:
            raise SystemExit(1)
