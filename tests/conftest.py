"""
Shared pytest fixtures for the Porirua Club Platform test suite.

Provides:
    - app: Flask application built with the "testing" config
    - client: Flask test client
    - page_app / page_client: app with a catch-all page that renders the
      layout variables, for exercising the view-state render context
    - isolated_environ: os.environ copy for tests that load .env files
"""

import os

import pytest
from flask import render_template_string

from venue_desk import create_app

# Minimal stand-in for the main layout: just the variables it consumes
LAYOUT = "{{ title }}|{{ page_type }}|{{ active_tab }}|{{ active }}"


@pytest.fixture()
def app():
    """Create a fresh Flask application per test."""
    return create_app("testing")


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def page_app():
    """App whose every non-API path renders LAYOUT."""
    application = create_app("testing")

    @application.route("/", defaults={"anything": ""})
    @application.route("/<path:anything>")
    def _page(anything):
        return render_template_string(LAYOUT)

    return application


@pytest.fixture()
def page_client(page_app):
    return page_app.test_client()



@pytest.fixture()
def isolated_environ(monkeypatch):
    """Swap os.environ for a copy so variables loaded from .env files don't leak."""
    monkeypatch.setattr(os, "environ", dict(os.environ))
    return os.environ
