"""Shared helpers: logging setup and field validators."""
