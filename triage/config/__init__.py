"""Configuration module for the triage system.

Available Configurations:
- ReviewConfig: cursor database, cursor key, records file, stream batching
"""

from triage.config.review_config import (
    DEFAULT_REVIEW_CONFIG,
    TEST_REVIEW_CONFIG,
    ReviewConfig,
)

__all__ = [
    "ReviewConfig",
    "DEFAULT_REVIEW_CONFIG",
    "TEST_REVIEW_CONFIG",
]
