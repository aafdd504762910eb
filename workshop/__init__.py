"""
Workshop Module

Course-facing surface of the SQL sandbox.

This module provides:
- YAML-based configuration loading
- Request/response schemas matching the chat client's wire format
- The course gate in front of the sandbox
- CLI for checking, running and describing queries
"""

__version__ = "0.1.0"
