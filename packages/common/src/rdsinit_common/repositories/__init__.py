"""
Data Access Layer for the Initialized Schema.

The initialization script owns every write; repositories here only read back
what it produced, so the job can report the seed row count and the integration
tests can assert on it without embedding SQL strings.
"""

from __future__ import annotations

from .seed_repository import SeedRepository

__all__ = ["SeedRepository"]
