"""Exception handlers for the application."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from page_renderer.exceptions import RendererException
from page_renderer.logging_config import get_logger, log_with_context

logger = get_logger(__name__)


async def renderer_exception_handler(request: Request, exc: RendererException) -> JSONResponse:
    """Handle renderer exceptions escaping a route with their HTTP status code.

    Returns structured JSON error responses with error code, message and
    optional details.
    """
    log_with_context(
        logger,
        "warning",
        "Renderer error",
        error_code=exc.code.value,
        error_message=exc.message,
        status_code=exc.status_code,
        method=request.method,
        url=str(request.url),
        event_type="renderer_error",
    )

    error_content: dict[str, Any] = {"code": exc.code.value, "message": exc.message, "details": exc.details}

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": error_content},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle general exceptions with logging."""
    log_with_context(
        logger,
        "error",
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        method=request.method,
        url=str(request.url),
        event_type="unhandled_error",
    )
    logger.error("Exception traceback:", exc_info=exc)

    # Don't expose internal error details to clients
    return JSONResponse(
        status_code=500,
        content={"error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(RendererException, renderer_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
