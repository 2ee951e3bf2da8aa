"""FastAPI application entry point for the triage API."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from triage import __version__
from triage.api.middleware.logging_middleware import LoggingMiddleware
from triage.api.routes.health import router as health_router
from triage.api.routes.review import router as review_router
from triage.api.startup import start_review_queue, stop_review_queue


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Wire and load the review queue for the lifetime of the app."""
    await start_review_queue()
    yield
    stop_review_queue()


app = FastAPI(
    title="Triage Review API",
    description="Review contacts one at a time and stage unwanted ones for deletion",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)
app.include_router(health_router)
app.include_router(review_router)
