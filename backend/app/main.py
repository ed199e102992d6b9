"""FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.knowledge import router as knowledge_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.config import get_settings
from backend.app.knowledge.base import KnowledgeBase
from backend.app.utils.logging import configure_logging
from backend.app.utils.metrics import PrometheusKnowledgeMetrics


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the process-wide knowledge base once at startup."""
    settings = get_settings()
    configure_logging(settings.log_level)
    app.state.knowledge_base = KnowledgeBase.from_settings(
        settings, metrics=PrometheusKnowledgeMetrics()
    )
    yield


app = FastAPI(title="Knowledge Base API", version="0.1.0", lifespan=lifespan)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(knowledge_router, tags=["knowledge"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Knowledge Base API", "version": "0.1.0"}
