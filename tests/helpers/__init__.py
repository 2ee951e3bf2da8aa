"""Test helpers for triage tests.

Usage:
    from tests.helpers import identifiers, make_records
"""

from tests.helpers.records import identifiers, make_records

__all__ = ["identifiers", "make_records"]
