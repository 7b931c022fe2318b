"""Application factory for creating and configuring the FastAPI app."""

from fastapi import FastAPI

from page_renderer import __version__
from page_renderer.core.lifespan import lifespan
from page_renderer.middleware.error_handlers import register_error_handlers
from page_renderer.routers import health_router
from page_renderer.state_managers import RenderingContext


def create_app(context: RenderingContext | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        context: Rendering context to use instead of one built from settings

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Page Renderer",
        description="Localised HTML page rendering with a JSON error fallback.",
        version=__version__,
        lifespan=lifespan,
    )

    if context is not None:
        app.state.rendering_context = context

    register_error_handlers(app)

    app.include_router(health_router.router, tags=["health"])

    return app
