"""Tests for seeding the catalog into storage (F2)."""

import pytest

from cyberguard.config.portal_content import _get_default_content
from cyberguard.core.catalog import seed_storage
from cyberguard.db import RecordValidationError


class TestSeedStorage:
    def test_counts(self, storage):
        counts = seed_storage(storage, _get_default_content())
        assert counts == {"modules": 5, "assessments": 3, "resources": 3, "security_events": 2}

    def test_assessments_link_to_modules(self, storage):
        seed_storage(storage, _get_default_content())
        modules = {m.id: m.title for m in storage.get_modules()}
        first = storage.get_assessments()[0]
        assert modules[first.module_id] == "Password Security"
        assert len(first.questions) == 10
        assert first.time_limit == "15 min"

    def test_threats_become_security_events(self, storage):
        seed_storage(storage, _get_default_content())
        events = storage.get_security_events()
        assert [e.severity for e in events] == ["high", "critical"]
        assert events[1].tags == ["Data Breach", "SaaS", "Authentication"]

    def test_popular_flag(self, storage):
        seed_storage(storage, _get_default_content())
        assert [r.popular for r in storage.get_resources()] == [True, False, True]

    def test_second_seed_is_noop(self, storage):
        seed_storage(storage, _get_default_content())
        counts = seed_storage(storage, _get_default_content())
        assert sum(counts.values()) == 0
        assert len(storage.get_modules()) == 5

    def test_invalid_item_leaves_storage_empty(self, storage):
        content = _get_default_content()
        content["resources"][-1]["type"] = "podcast"
        with pytest.raises(RecordValidationError, match="type"):
            seed_storage(storage, content)
        assert storage.get_modules() == []
        assert storage.get_assessments() == []

    def test_missing_key_leaves_storage_empty(self, storage):
        content = _get_default_content()
        del content["threats"][0]["severity"]
        with pytest.raises(KeyError):
            seed_storage(storage, content)
        assert storage.get_modules() == []

    def test_reseed_after_failure(self, storage):
        content = _get_default_content()
        content["resources"][0]["type"] = "podcast"
        with pytest.raises(RecordValidationError):
            seed_storage(storage, content)
        counts = seed_storage(storage, _get_default_content())
        assert counts["modules"] == 5
