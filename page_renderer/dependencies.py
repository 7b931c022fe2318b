"""FastAPI dependencies for dependency injection."""

from fastapi import Request

from page_renderer.exceptions import ConfigurationException, ErrorCode
from page_renderer.state_managers import RenderingContext
from page_renderer.views.renderer import Renderer


async def get_rendering_context(request: Request) -> RenderingContext:
    """
    Get the rendering context from app state.

    Args:
        request: The FastAPI request object.

    Returns:
        The RenderingContext built at startup.

    Raises:
        ConfigurationException: If the application started without one.
    """
    context: RenderingContext | None = getattr(request.app.state, "rendering_context", None)

    if context is None:
        raise ConfigurationException(
            "Rendering context not initialized",
            code=ErrorCode.NOT_INITIALIZED,
            status_code=503,
        )

    return context


async def get_renderer(request: Request) -> Renderer:
    """Get the shared Renderer for route handlers."""
    context = await get_rendering_context(request)
    return context.renderer
