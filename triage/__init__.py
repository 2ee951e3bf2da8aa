"""
Contact Triage - review-queue and staged-deletion manager

Records are reviewed one at a time. Each one is either kept (the cursor
advances) or trashed (moved to a staging area). Staged records can be
restored to the end of the review queue or purged permanently through the
record provider. The review position survives restarts.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
