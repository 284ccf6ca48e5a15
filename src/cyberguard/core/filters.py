"""List filters behind the search boxes and tabs of the portal pages.

All filters take the page payload (a list of dicts with snake_case keys)
and return a new list in the original order. An empty search or an "all"
selector keeps every item.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any

ALL = "all"
RECENT_DAYS = 7

RESOURCE_TYPE_TABS = {
    "documents": "document",
    "videos": "video",
    "templates": "template",
}

_RELATIVE_PATTERN = re.compile(
    r"^\s*(?P<count>\d+|an?|one)\s+(?P<unit>minute|hour|day|week|month|year)s?\s+ago\s*$",
    re.IGNORECASE,
)
_UNIT_DAYS = {"minute": 0, "hour": 0, "day": 1, "week": 7, "month": 30, "year": 365}


def matches_search(item: dict[str, Any], query: str | None, fields: tuple[str, ...]) -> bool:
    """Case-insensitive substring match against any of the given fields."""
    if not query:
        return True
    needle = query.lower()
    return any(needle in str(item.get(f) or "").lower() for f in fields)


def categories_of(items: list[dict[str, Any]]) -> list[str]:
    """Distinct categories in first-seen order, prefixed with "all"."""
    seen: list[str] = []
    for item in items:
        category = item.get("category")
        if category and category not in seen:
            seen.append(category)
    return [ALL, *seen]


def age_in_days(label: str, today: date | None = None) -> int | None:
    """Convert a date label into days elapsed.

    Understands "Today", "Yesterday", "N <unit>(s) ago" and ISO dates.
    Returns None for anything else.
    """
    if not label:
        return None
    text = label.strip().lower()
    if text in ("today", "just now"):
        return 0
    if text == "yesterday":
        return 1

    match = _RELATIVE_PATTERN.match(text)
    if match:
        raw = match.group("count")
        count = 1 if raw in ("a", "an", "one") else int(raw)
        return count * _UNIT_DAYS[match.group("unit").lower()]

    try:
        parsed = date.fromisoformat(text[:10])
    except ValueError:
        return None
    return ((today or date.today()) - parsed).days


def filter_modules(
    modules: list[dict[str, Any]],
    search: str | None = None,
    category: str | None = None,
    status: str | None = None,
) -> list[dict[str, Any]]:
    """Filter learning modules by search text, category and status."""
    return [
        m
        for m in modules
        if matches_search(m, search, ("title", "description"))
        and (not category or category == ALL or m.get("category") == category)
        and (not status or status == ALL or m.get("status") == status)
    ]


def filter_assessments(
    assessments: list[dict[str, Any]], tab: str | None = None
) -> list[dict[str, Any]]:
    """Filter assessments by tab: all, completed or pending.

    Pending covers both in-progress and not-started assessments.
    """
    if not tab or tab == ALL:
        return list(assessments)
    if tab == "completed":
        return [a for a in assessments if a.get("status") == "completed"]
    if tab == "pending":
        return [a for a in assessments if a.get("status") in ("in-progress", "not-started")]
    return list(assessments)


def filter_resources(
    resources: list[dict[str, Any]],
    search: str | None = None,
    tab: str | None = None,
) -> list[dict[str, Any]]:
    """Filter resources by search text and tab.

    The tab is "all", "popular", a type tab (documents, videos, templates)
    or the name of a category. Unknown tabs only apply the search.
    """
    categories = categories_of(resources)
    result = []
    for r in resources:
        if not matches_search(r, search, ("title", "description")):
            continue
        if not tab or tab == ALL:
            result.append(r)
        elif tab == "popular":
            if r.get("popular"):
                result.append(r)
        elif tab in RESOURCE_TYPE_TABS:
            if r.get("type") == RESOURCE_TYPE_TABS[tab]:
                result.append(r)
        elif tab in categories:
            if r.get("category") == tab:
                result.append(r)
        else:
            result.append(r)
    return result


def filter_threats(
    threats: list[dict[str, Any]],
    search: str | None = None,
    tab: str | None = None,
    today: date | None = None,
) -> list[dict[str, Any]]:
    """Filter threat bulletins by search text and tab: all, critical or recent."""
    result = []
    for t in threats:
        if not matches_search(t, search, ("title", "summary")):
            continue
        if tab == "critical" and t.get("severity") != "critical":
            continue
        if tab == "recent":
            age = age_in_days(t.get("date", ""), today)
            if age is None or age >= RECENT_DAYS:
                continue
        result.append(t)
    return result
