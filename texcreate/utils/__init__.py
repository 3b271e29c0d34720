"""
Shared utilities for texcreate.

Common functionality used across contexts:
- Logger setup
- Environment-driven settings
- Timestamps
"""

from texcreate.utils.timestamp import now

__all__ = ["now"]
