"""Core portal logic.

Modules:
- models: record types for the relational schema
- auth: bcrypt password hashing
- filters: page search/tab filters
- reports: report and assessment aggregations
- catalog: seed the catalog into storage
"""

__all__ = [
    "models",
    "auth",
    "filters",
    "reports",
    "catalog",
]
