"""
Sandbox Module

Admission and isolated execution of untrusted workshop SQL.

This module provides:
- A lexical admission policy (banned keywords + required SELECT prefix)
- Per-request execution against a private in-memory fixture
- A measured-after-completion time budget
- Schema reflection for editor assistance
- A failure taxonomy shared by all of the above

WARNING: The admission policy is a coarse keyword filter, not a SQL parser.
It rejects safe queries that mention a banned word (for example inside a
string literal) and always rejects UNION.
"""

__version__ = "0.1.0"
