"""API routers."""

from triage.api.routes.health import router as health_router
from triage.api.routes.review import router as review_router

__all__ = ["health_router", "review_router"]
