"""
Route view-state classifier.

Derives the two layout flags the templates need from a request path:
``page_type`` selects the page chrome, ``active_tab`` picks the highlighted
tab on a function detail page.

    /functions/<id>                 -> function-detail / info
    /functions/<id>/tasks           -> function-detail / tasks
    /functions/<id>/notes           -> function-detail / notes
    /functions/<id>/communications  -> function-detail / communications
    /functions/<id>/quote           -> function-detail / quote
    /functions/<id>/edit            -> function-detail / edit
    anything else                   -> "" / ""

In the default segment mode every segment after the identifier is checked,
not only the first, so the tab priority still decides paths such as
/functions/<id>/edit/tasks (-> tasks).

Usage:
    from venue_desk.services.view_state import classify
    state = classify("/functions/3f2a1b9c-d4e5-46f7-8a9b-0c1d2e3f4a5b/notes")
    state.as_context()  # {"page_type": "function-detail", "active_tab": "notes"}
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class PageType(str, Enum):
    NONE = ""
    FUNCTION_DETAIL = "function-detail"


class ActiveTab(str, Enum):
    """Tabs of the function detail page."""
    NONE = ""
    TASKS = "tasks"
    NOTES = "notes"
    COMMUNICATIONS = "communications"
    QUOTE = "quote"
    EDIT = "edit"
    INFO = "info"


class MatchMode(str, Enum):
    """How sub-path keywords are located once the detail route matched.

    SEGMENT   only path segments after the identifier count, and a segment
              must equal the keyword.
    SUBSTRING legacy behaviour: ``/<keyword>`` anywhere in the full path,
              identifier included.
    """
    SEGMENT = "segment"
    SUBSTRING = "substring"


# First match wins.
TAB_PRIORITY: tuple[tuple[str, ActiveTab], ...] = (
    ("tasks", ActiveTab.TASKS),
    ("notes", ActiveTab.NOTES),
    ("communications", ActiveTab.COMMUNICATIONS),
    ("quote", ActiveTab.QUOTE),
    ("edit", ActiveTab.EDIT),
)

# Identifier is shape-checked only (hex digits and hyphens), never parsed.
FUNCTION_DETAIL_RE = re.compile(r"^/functions/[0-9a-f-]{8,36}", re.IGNORECASE)

_SUBSTRING_RES = tuple(
    (re.compile("/" + re.escape(keyword), re.IGNORECASE), tab)
    for keyword, tab in TAB_PRIORITY
)

# "" + "functions" + identifier
_DETAIL_PREFIX_SEGMENTS = 3


@dataclass(frozen=True)
class ViewState:
    """Per-request layout flags handed to the render context."""

    page_type: PageType = PageType.NONE
    active_tab: ActiveTab = ActiveTab.NONE

    @property
    def is_function_detail(self) -> bool:
        return self.page_type is PageType.FUNCTION_DETAIL

    def as_context(self) -> dict[str, str]:
        return {
            "page_type": self.page_type.value,
            "active_tab": self.active_tab.value,
        }


UNSET = ViewState()


def coerce_match_mode(value: MatchMode | str) -> MatchMode:
    """Accept a MatchMode or its string value (case-insensitive).

    Raises:
        ValueError: unknown mode name.
    """
    if isinstance(value, MatchMode):
        return value
    return MatchMode(str(value).strip().lower())


def _tab_from_substring(path: str) -> ActiveTab | None:
    for pattern, tab in _SUBSTRING_RES:
        if pattern.search(path):
            return tab
    return None


def _tab_from_segments(path: str) -> ActiveTab | None:
    trailing = {seg.lower() for seg in path.split("/")[_DETAIL_PREFIX_SEGMENTS:]}
    for keyword, tab in TAB_PRIORITY:
        if keyword in trailing:
            return tab
    return None


def classify(path: str, match_mode: MatchMode | str = MatchMode.SEGMENT) -> ViewState:
    """Map a request path to its ViewState.

    Total over any string: paths outside ``/functions/<id>`` yield the unset
    state, never an error. The path is used as given (no percent-decoding,
    no trailing-slash handling).
    """
    mode = coerce_match_mode(match_mode)
    if not path or not FUNCTION_DETAIL_RE.match(path):
        return UNSET

    if mode is MatchMode.SUBSTRING:
        tab = _tab_from_substring(path)
    else:
        tab = _tab_from_segments(path)

    return ViewState(
        page_type=PageType.FUNCTION_DETAIL,
        active_tab=tab or ActiveTab.INFO,
    )
