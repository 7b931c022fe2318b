"""In-memory response writer bridging the renderer and Starlette responses."""

from io import BytesIO

from fastapi.responses import Response

from page_renderer.logging_config import get_logger, log_with_context

logger = get_logger(__name__)


class BufferedResponseWriter:
    """Collect status, content type and body written by the renderer.

    Like an HTTP response, only the first header write counts.
    """

    def __init__(self):
        self.status_code: int = 200
        self.content_type: str | None = None
        self.header_written = False
        self._body = BytesIO()

    def write_header(self, status_code: int, content_type: str) -> None:
        if self.header_written:
            log_with_context(
                logger,
                "warning",
                "Superfluous response header write ignored",
                status_code=status_code,
                previous_status_code=self.status_code,
                event_type="response_header_rewrite",
            )
            return
        self.status_code = status_code
        self.content_type = content_type
        self.header_written = True

    def write(self, data: bytes) -> int:
        return self._body.write(data)

    @property
    def body(self) -> bytes:
        return self._body.getvalue()

    def to_response(self) -> Response:
        """Build a Starlette response from what has been written."""
        return Response(content=self.body, status_code=self.status_code, media_type=self.content_type)
