"""Main FastAPI application entry point."""

from pathlib import Path

from dotenv import load_dotenv

from page_renderer.config import get_settings
from page_renderer.core.app_factory import create_app
from page_renderer.logging_config import setup_logging

# Load environment variables from .env file
load_dotenv(Path(__file__).parent.parent / ".env")

# Configure structured logging (JSON to file + console)
setup_logging(get_settings().log_level)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "page_renderer.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )
