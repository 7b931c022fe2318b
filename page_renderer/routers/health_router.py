"""Health endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from page_renderer import __version__
from page_renderer.models import HealthResponse, ReadinessResponse
from page_renderer.state_managers import RenderingContext

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint.

    For the state of the rendering context, use `/health/ready`.
    """
    return HealthResponse(status="ok", version=__version__)


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request):
    """Readiness probe - can the application render pages?

    **Returns:**
    - 200: Catalog loaded and renderer built
    - 503: Rendering context not initialized
    """
    context: RenderingContext | None = getattr(request.app.state, "rendering_context", None)
    ready = context is not None and context.initialized

    languages: dict[str, int] = {}
    templates = 0
    if ready:
        languages = context.resolver.catalog.message_counts()
        templates = len(context.renderer.list_templates())

    return JSONResponse(
        status_code=200 if ready else 503,
        content=ReadinessResponse(
            status="ready" if ready else "not_ready",
            version=__version__,
            timestamp=datetime.now(UTC),
            languages=languages,
            templates=templates,
        ).model_dump(mode="json"),
    )
