"""Tests for the built-in portal payloads (F1)."""

import pytest

from cyberguard.config import portal_content
from cyberguard.config.portal_content import (
    SECTIONS,
    clear_content_cache,
    get_section,
    load_portal_content,
)


@pytest.fixture
def content_file(tmp_path, monkeypatch):
    path = tmp_path / "portal_content_v1.yaml"
    monkeypatch.setattr(portal_content, "CONTENT_FILE", path)
    clear_content_cache()
    yield path
    clear_content_cache()


class TestDefaultContent:
    """The defaults match the figures shown by the portal pages."""

    def test_all_sections_present(self, content_file):
        content = load_portal_content()
        assert set(content) == set(SECTIONS)
        assert "security_score" in SECTIONS
        assert "security_incidents" in SECTIONS

    def test_security_score(self, content_file):
        assert get_section("security_score") == {
            "score": 73,
            "change": 5,
            "strengths": 4,
            "warnings": 2,
            "critical": 1,
        }

    def test_catalog_sizes(self, content_file):
        assert len(get_section("modules")) == 5
        assert len(get_section("assessments")) == 3
        assert len(get_section("threats")) == 2
        assert len(get_section("resources")) == 3

    def test_ids_are_unique_per_section(self, content_file):
        for name in ("modules", "assessments", "threats", "resources", "security_incidents"):
            ids = [item["id"] for item in get_section(name)]
            assert len(ids) == len(set(ids)), name

    def test_optional_fields_absent_not_null(self, content_file):
        """Items without progress or rating simply omit the key."""
        data_protection = get_section("dashboard_modules")[2]
        assert "progress" not in data_protection
        assert "rating" not in data_protection


class TestGetSection:
    def test_returns_copy(self, content_file):
        modules = get_section("modules")
        modules.clear()
        assert len(get_section("modules")) == 5

    def test_unknown_section(self, content_file):
        with pytest.raises(KeyError):
            get_section("nope")


class TestOverrides:
    def test_yaml_replaces_whole_section(self, content_file):
        content_file.write_text(
            "team_progress:\n"
            "  - username: Ana\n"
            "    progress: 10\n"
        )
        assert get_section("team_progress") == [{"username": "Ana", "progress": 10}]
        assert len(get_section("modules")) == 5

    def test_unknown_section_ignored(self, content_file):
        content_file.write_text("bogus: 1\n")
        assert "bogus" not in load_portal_content()
