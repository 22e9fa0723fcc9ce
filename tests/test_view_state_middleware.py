"""Tests for the view-state middleware: g.view_state and the template context."""

import pytest
from flask import g, render_template_string

from venue_desk import create_app
from venue_desk.config import TestingConfig
from venue_desk.core.exceptions import ConfigurationError
from venue_desk.middleware.view_state import current_view_state
from venue_desk.services.view_state import UNSET, ActiveTab, MatchMode, PageType

FID = "3f2a1b9c-d4e5-46f7-8a9b-0c1d2e3f4a5b"


def _parts(res) -> list[str]:
    """[title, page_type, active_tab, active] from the LAYOUT page."""
    return res.get_data(as_text=True).split("|")


class TestRenderContext:
    """Layout variables injected by the context processor."""

    def test_detail_page(self, page_client):
        res = page_client.get(f"/functions/{FID}")
        assert res.status_code == 200
        assert _parts(res) == ["Porirua Club Platform", "function-detail", "info", ""]

    @pytest.mark.parametrize("tab", ["tasks", "notes", "communications", "quote", "edit"])
    def test_tab_pages(self, page_client, tab):
        res = page_client.get(f"/functions/{FID}/{tab}")
        assert _parts(res)[1:3] == ["function-detail", tab]

    def test_other_page_defaults(self, page_client):
        res = page_client.get("/dashboard")
        assert _parts(res) == ["Porirua Club Platform", "", "", ""]

    def test_uppercase_path(self, page_client):
        res = page_client.get(f"/FUNCTIONS/{FID.upper()}/EDIT")
        assert _parts(res)[1:3] == ["function-detail", "edit"]

    def test_no_leak_between_requests(self, page_client):
        """Each request starts from unset flags."""
        assert _parts(page_client.get(f"/functions/{FID}/tasks"))[2] == "tasks"
        assert _parts(page_client.get("/inbox"))[1:3] == ["", ""]
        assert _parts(page_client.get(f"/functions/{FID}"))[2] == "info"

    def test_site_title_from_config(self, page_app):
        page_app.config["SITE_TITLE"] = "Club Desk"
        res = page_app.test_client().get("/")
        assert _parts(res)[0] == "Club Desk"


class TestRequestState:
    """g.view_state set by the before_request hook."""

    def test_g_view_state(self, app):
        with app.test_request_context(f"/functions/{FID}/quote"):
            app.preprocess_request()
            assert g.view_state.page_type is PageType.FUNCTION_DETAIL
            assert g.view_state.active_tab is ActiveTab.QUOTE
            assert current_view_state() is g.view_state

    def test_on_demand_without_hook(self, app):
        with app.test_request_context(f"/functions/{FID}/notes"):
            state = current_view_state()
            assert state.active_tab is ActiveTab.NOTES
            assert g.view_state is state

    def test_outside_request(self, app):
        with app.app_context():
            assert current_view_state() is UNSET
            assert render_template_string("[{{ page_type }}][{{ active_tab }}]") == "[][]"

    def test_unrouted_path_still_classified(self, app):
        """404 pages get the flags too (hook runs before dispatch)."""
        with app.test_request_context(f"/functions/{FID}/edit"):
            app.preprocess_request()
            assert g.view_state.active_tab is ActiveTab.EDIT


class TestMatchModeConfig:
    """VIEW_STATE_MATCH_MODE selects keyword matching."""

    def test_default_segment(self, app):
        assert app.config["VIEW_STATE_MATCH_MODE"] is MatchMode.SEGMENT

    def test_substring_mode(self, monkeypatch):
        monkeypatch.setattr(TestingConfig, "VIEW_STATE_MATCH_MODE", "substring")
        application = create_app("testing")
        assert application.config["VIEW_STATE_MATCH_MODE"] is MatchMode.SUBSTRING
        with application.test_request_context(f"/functions/{FID}/tasksheet"):
            application.preprocess_request()
            assert g.view_state.active_tab is ActiveTab.TASKS

    def test_segment_mode_ignores_partial_keyword(self, app):
        with app.test_request_context(f"/functions/{FID}/tasksheet"):
            app.preprocess_request()
            assert g.view_state.active_tab is ActiveTab.INFO

    def test_invalid_mode_rejected(self, monkeypatch):
        monkeypatch.setattr(TestingConfig, "VIEW_STATE_MATCH_MODE", "fuzzy")
        with pytest.raises(ConfigurationError, match="VIEW_STATE_MATCH_MODE"):
            create_app("testing")
