"""Tests for page search and tab filters (F1)."""

from datetime import date

import pytest

from cyberguard.config.portal_content import _get_default_content
from cyberguard.core.filters import (
    age_in_days,
    categories_of,
    filter_assessments,
    filter_modules,
    filter_resources,
    filter_threats,
    matches_search,
)


@pytest.fixture
def content():
    return _get_default_content()


class TestMatchesSearch:
    def test_empty_query_matches(self):
        assert matches_search({"title": "x"}, "", ("title",))
        assert matches_search({"title": "x"}, None, ("title",))

    def test_case_insensitive(self):
        assert matches_search({"title": "Phishing Awareness"}, "PHISH", ("title",))

    def test_missing_field(self):
        assert not matches_search({"title": None}, "a", ("title", "description"))


class TestCategories:
    def test_first_seen_order_with_all(self, content):
        assert categories_of(content["resources"]) == ["all", "Guidelines", "Templates", "Playbooks"]

    def test_empty(self):
        assert categories_of([]) == ["all"]


class TestAgeInDays:
    @pytest.mark.parametrize(
        "label,expected",
        [
            ("Today", 0),
            ("Yesterday", 1),
            ("2 hours ago", 0),
            ("3 days ago", 3),
            ("1 week ago", 7),
            ("a week ago", 7),
            ("2 weeks ago", 14),
            ("1 month ago", 30),
        ],
    )
    def test_relative_labels(self, label, expected):
        assert age_in_days(label) == expected

    def test_iso_date(self):
        assert age_in_days("2026-01-01", today=date(2026, 1, 4)) == 3

    @pytest.mark.parametrize("label", ["", "soon", "3 days", "next week"])
    def test_unparseable(self, label):
        assert age_in_days(label) is None


class TestFilterModules:
    def test_no_filters_returns_all(self, content):
        assert filter_modules(content["modules"]) == content["modules"]

    def test_search_title_or_description(self, content):
        titles = [m["title"] for m in filter_modules(content["modules"], search="smartphones")]
        assert titles == ["Mobile Device Security"]

    def test_category(self, content):
        result = filter_modules(content["modules"], category="Email Security")
        assert [m["id"] for m in result] == [2]

    def test_status(self, content):
        result = filter_modules(content["modules"], status="not-started")
        assert [m["id"] for m in result] == [3, 4, 5]

    def test_all_selectors(self, content):
        assert len(filter_modules(content["modules"], category="all", status="all")) == 5

    def test_combined_filters(self, content):
        result = filter_modules(content["modules"], search="security", status="completed")
        assert [m["id"] for m in result] == [1]


class TestFilterAssessments:
    def test_completed(self, content):
        assert [a["id"] for a in filter_assessments(content["assessments"], "completed")] == [1]

    def test_pending_covers_in_progress_and_not_started(self, content):
        assert [a["id"] for a in filter_assessments(content["assessments"], "pending")] == [2, 3]

    def test_all(self, content):
        assert len(filter_assessments(content["assessments"], "all")) == 3


class TestFilterResources:
    def test_popular(self, content):
        assert [r["id"] for r in filter_resources(content["resources"], tab="popular")] == [1, 3]

    def test_type_tab(self, content):
        assert [r["id"] for r in filter_resources(content["resources"], tab="templates")] == [2]
        assert [r["id"] for r in filter_resources(content["resources"], tab="documents")] == [1, 3]
        assert filter_resources(content["resources"], tab="videos") == []

    def test_category_tab(self, content):
        assert [r["id"] for r in filter_resources(content["resources"], tab="Playbooks")] == [3]

    def test_search(self, content):
        result = filter_resources(content["resources"], search="password")
        assert [r["id"] for r in result] == [2]

    def test_unknown_tab_only_searches(self, content):
        assert len(filter_resources(content["resources"], tab="whatever")) == 3


class TestFilterThreats:
    def test_critical(self, content):
        assert [t["id"] for t in filter_threats(content["threats"], tab="critical")] == [2]

    def test_recent_is_under_a_week(self, content):
        """A bulletin from 3 days ago is recent, one from a week ago is not."""
        assert [t["id"] for t in filter_threats(content["threats"], tab="recent")] == [1]

    def test_search_summary(self, content):
        result = filter_threats(content["threats"], search="cloudservice")
        assert [t["id"] for t in result] == [2]

    def test_all(self, content):
        assert len(filter_threats(content["threats"], tab="all")) == 2
