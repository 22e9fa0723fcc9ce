"""
View-state middleware.

Classifies every request path once, stores the immutable result on
``g.view_state`` and exposes it to templates through a context processor:

    {{ page_type }}   "function-detail" or ""
    {{ active_tab }}  "tasks" | "notes" | "communications" | "quote" | "edit" | "info" | ""
    {{ title }}       SITE_TITLE fallback
    {{ active }}      "" fallback for the main navigation

Chain order:
    timing.py  →  view_state.py  →  route handler  →  template render
"""

import logging

from flask import current_app, g, has_request_context, request

from venue_desk.core.exceptions import ConfigurationError
from venue_desk.services.view_state import UNSET, ViewState, classify, coerce_match_mode

logger = logging.getLogger(__name__)


def init_view_state(app):
    """Validate the match mode and register the before_request hook and context processor."""
    raw_mode = app.config.get("VIEW_STATE_MATCH_MODE", "segment")
    try:
        mode = coerce_match_mode(raw_mode)
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid VIEW_STATE_MATCH_MODE {raw_mode!r} (expected 'segment' or 'substring')"
        ) from exc
    app.config["VIEW_STATE_MATCH_MODE"] = mode

    @app.before_request
    def _set_view_state():
        g.view_state = classify(request.path, mode)
        if g.view_state.is_function_detail:
            logger.debug("View state for %s: %s/%s", request.path,
                         g.view_state.page_type.value, g.view_state.active_tab.value)

    @app.context_processor
    def _inject_view_state():
        ctx = {
            "title": current_app.config.get("SITE_TITLE", ""),
            "active": "",
        }
        ctx.update(current_view_state().as_context())
        return ctx


def current_view_state() -> ViewState:
    """Return the view state of the current request.

    Falls back to classifying the path on demand when the hook has not run,
    and to the unset state outside a request.
    """
    if not has_request_context():
        return UNSET
    state = g.get("view_state")
    if state is None:
        mode = current_app.config.get("VIEW_STATE_MATCH_MODE", "segment")
        state = classify(request.path, mode)
        g.view_state = state
    return state
