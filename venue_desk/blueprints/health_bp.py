"""
Health check blueprint.

Endpoints:
    GET /api/v1/health        — app name + uptime
    GET /api/v1/health/ready  — simple 200 for load balancers
"""

import time

from flask import Blueprint, current_app, jsonify

health_bp = Blueprint("health_bp", __name__, url_prefix="/api/v1/health")

_STARTED_AT = time.monotonic()


@health_bp.route("", methods=["GET"])
def health():
    return jsonify({
        "status": "ok",
        "app": current_app.config.get("SITE_TITLE"),
        "uptime_s": round(time.monotonic() - _STARTED_AT, 1),
    }), 200


@health_bp.route("/ready", methods=["GET"])
def ready():
    """Simple readiness check — always 200 if app is running."""
    return jsonify({"status": "ok"}), 200
