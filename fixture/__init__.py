"""
Fixture Module

Deterministic teaching dataset for the SQL workshop.

This module provides:
- The fixed schema and seed rows (employees, departments, products, orders)
- Per-call in-memory SQLite instances that are never shared
- Scoped acquisition/release via ``open_fixture``
"""

__version__ = "0.1.0"

from .dataset import Fixture, FixtureUnavailable, build, open_fixture

__all__ = [
    "Fixture",
    "FixtureUnavailable",
    "build",
    "open_fixture",
]
