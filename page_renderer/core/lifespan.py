"""Application lifespan management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from page_renderer import __version__
from page_renderer.config import get_settings
from page_renderer.logging_config import get_logger, log_with_context
from page_renderer.state_managers import RenderingContext

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the rendering context on startup and drop it on shutdown.

    Exceptions after yield are re-raised so cleanup always runs.
    """
    log_with_context(
        logger,
        "info",
        "Starting page renderer",
        version=__version__,
        event_type="app_startup",
    )

    # Tests may install a context before startup
    context: RenderingContext | None = getattr(app.state, "rendering_context", None)
    if context is None:
        context = RenderingContext(get_settings())
        app.state.rendering_context = context
    await context.initialize()

    try:
        yield
    except Exception as e:
        log_with_context(
            logger,
            "error",
            "Application error during lifespan",
            error=str(e),
            error_type=type(e).__name__,
            event_type="app_error",
        )
        raise
    finally:
        log_with_context(
            logger,
            "info",
            "Shutting down page renderer",
            event_type="app_shutdown",
        )
        await context.cleanup()
        log_with_context(
            logger,
            "info",
            "Rendering context cleaned up",
            event_type="rendering_context_cleanup",
        )
