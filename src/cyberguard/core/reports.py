"""Aggregations for the reports and assessments pages.

Inputs are the report payloads with snake_case keys. Percentages and
averages are rounded half-up to whole numbers; empty inputs give 0.
"""

from __future__ import annotations

import math
from typing import Any

from cyberguard.core.filters import filter_assessments


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _percentage(part: float, whole: float) -> int:
    if not whole:
        return 0
    return round_half_up(part / whole * 100)


def module_completion_totals(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Sum per-module completion counts into pie-chart slices."""
    return [
        {"name": "Completed", "value": sum(r.get("completed", 0) for r in rows)},
        {"name": "In Progress", "value": sum(r.get("in_progress", 0) for r in rows)},
        {"name": "Not Started", "value": sum(r.get("not_started", 0) for r in rows)},
    ]


def module_completion_percentage(row: dict[str, Any]) -> int:
    """Share of users who completed one module."""
    total = row.get("completed", 0) + row.get("in_progress", 0) + row.get("not_started", 0)
    return _percentage(row.get("completed", 0), total)


def team_completion_rate(members: list[dict[str, Any]]) -> int:
    """Completed modules across the team as a share of all assigned modules."""
    completed = sum(m.get("completed_modules", 0) for m in members)
    total = sum(m.get("total_modules", 0) for m in members)
    return _percentage(completed, total)


def team_average_score(members: list[dict[str, Any]]) -> int:
    if not members:
        return 0
    return round_half_up(sum(m.get("average_score", 0) for m in members) / len(members))


def active_today_count(members: list[dict[str, Any]]) -> int:
    return sum(1 for m in members if m.get("last_activity") == "Today")


def assessment_status_counts(assessments: list[dict[str, Any]]) -> dict[str, int]:
    """Counts shown on the assessment page tabs."""
    return {
        "all": len(assessments),
        "completed": len(filter_assessments(assessments, "completed")),
        "pending": len(filter_assessments(assessments, "pending")),
    }


def average_completed_score(assessments: list[dict[str, Any]]) -> int:
    """Mean score over completed assessments that carry a score."""
    scores = [
        a["score"]
        for a in assessments
        if a.get("status") == "completed" and a.get("score")
    ]
    if not scores:
        return 0
    return round_half_up(sum(scores) / len(scores))


def build_reports_overview(
    team: list[dict[str, Any]],
    module_completion: list[dict[str, Any]],
) -> dict[str, Any]:
    """Headline figures and chart data for the reports page."""
    return {
        "completion_rate": team_completion_rate(team),
        "average_score": team_average_score(team),
        "active_today": active_today_count(team),
        "team_size": len(team),
        "completion_breakdown": module_completion_totals(module_completion),
        "module_completion_rates": [
            {"name": r["name"], "percentage": module_completion_percentage(r)}
            for r in module_completion
        ],
    }


def build_assessment_summary(assessments: list[dict[str, Any]]) -> dict[str, Any]:
    """Tab counts and average score for the assessments page."""
    return {
        "counts": assessment_status_counts(assessments),
        "average_score": average_completed_score(assessments),
    }
