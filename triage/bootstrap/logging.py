"""Bootstrap wiring for logging configuration.

The renderer follows the review config's environment, the same source
the review queue wiring reads, so a single ENVIRONMENT value decides
both.
"""

from __future__ import annotations

import structlog

from triage.bootstrap.review_queue import get_review_config
from triage.config.review_config import ReviewConfig
from triage.infrastructure.observability import configure_structlog


def configure_logging(config: ReviewConfig | None = None) -> ReviewConfig:
    """Configure structlog for the review config's environment.

    Args:
        config: Config to use; the shared review config when omitted.

    Returns:
        The config logging was configured from.
    """
    if config is None:
        config = get_review_config()
    configure_structlog(environment=config.environment)

    structlog.get_logger().bind(component="startup").info(
        "structured_logging_configured",
        environment=config.environment,
        renderer="json" if config.is_production else "console",
    )
    return config


__all__ = ["configure_logging"]
