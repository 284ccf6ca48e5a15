"""Load the portal catalog into storage.

The catalog pages are served from fixed payloads; seeding copies the same
modules, assessments, resources and threat bulletins into the relational
schema so the storage layer holds matching records.
"""

from __future__ import annotations

from typing import Any

import structlog

from cyberguard.config.portal_content import load_portal_content
from cyberguard.db.storage import MemStorage, Storage

logger = structlog.get_logger(__name__)


def seed_storage(storage: Storage, content: dict[str, Any] | None = None) -> dict[str, int]:
    """Insert catalog records into an empty storage.

    Does nothing when modules already exist, so repeated startups do not
    duplicate the catalog. The content is first loaded into a scratch
    MemStorage; a bad record raises before the target is touched.

    Args:
        storage: Target storage backend.
        content: Portal payloads; defaults to load_portal_content().

    Returns:
        Number of records created per table.

    Raises:
        KeyError: If a catalog item lacks a required key.
        StorageError: If a catalog item fails storage validation.
    """
    if storage.get_modules():
        logger.info("catalog_seed_skipped", reason="already_seeded")
        return {"modules": 0, "assessments": 0, "resources": 0, "security_events": 0}

    content = content or load_portal_content()

    _insert_catalog(MemStorage(), content)
    counts = _insert_catalog(storage, content)

    logger.info("catalog_seeded", **counts)
    return counts


def _insert_catalog(storage: Storage, content: dict[str, Any]) -> dict[str, int]:
    counts = {"modules": 0, "assessments": 0, "resources": 0, "security_events": 0}

    module_ids: dict[str, int] = {}
    for item in content["modules"]:
        module = storage.create_module(
            title=item["title"],
            description=item["description"],
            duration=item["duration"],
            level=item.get("level", "beginner"),
            category=item["category"],
        )
        module_ids[module.title] = module.id
        counts["modules"] += 1

    for item in content["assessments"]:
        question_count = int(item.get("questions", 0))
        storage.create_assessment(
            title=item["title"],
            description=item["description"],
            questions=[{"id": n} for n in range(1, question_count + 1)],
            module_id=module_ids.get(item.get("related_module", "")),
            time_limit=item.get("time_limit"),
        )
        counts["assessments"] += 1

    for item in content["resources"]:
        storage.create_resource(
            title=item["title"],
            description=item["description"],
            type=item["type"],
            category=item["category"],
            url=item["url"],
            file_size=item.get("file_size"),
            duration=item.get("duration"),
            popular=bool(item.get("popular", False)),
        )
        counts["resources"] += 1

    for item in content["threats"]:
        storage.create_security_event(
            title=item["title"],
            description=item["summary"],
            category=item["category"],
            severity=item["severity"],
            content=item.get("content"),
            source=item.get("source"),
            recommendations=item.get("recommendations"),
            industries=item.get("industries"),
            tags=item.get("tags"),
        )
        counts["security_events"] += 1

    return counts
