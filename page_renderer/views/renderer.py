"""Rendering gateway for HTML pages and JSON bodies.

The HTML path (a Jinja2 environment) and the JSON path (FastAPI's encoder)
are guarded by independent locks: renders on the same path are serialized,
while an HTML render never waits for a JSON render or the other way round.
Nothing here bounds how long a render takes; a template that hangs keeps the
HTML lock.
"""

import json
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import Response
from jinja2 import Environment, StrictUndefined, TemplateNotFound, select_autoescape
from markupsafe import Markup
from pydantic import BaseModel

from page_renderer.assets import AssetTemplateLoader
from page_renderer.config import Settings
from page_renderer.exceptions import (
    JSONRenderException,
    TemplateNotFoundException,
    TemplateRenderException,
)
from page_renderer.helpers.registry import HelperRegistry
from page_renderer.logging_config import get_logger, log_with_context
from page_renderer.models import ErrorResponse
from page_renderer.protocols import AssetLoader, ResponseWriter
from page_renderer.views.response_writer import BufferedResponseWriter

logger = get_logger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=UTF-8"
JSON_CONTENT_TYPE = "application/json; charset=UTF-8"


@dataclass(frozen=True)
class HTMLOptions:
    """Per-call HTML options.

    layout=None uses the configured default layout, layout="" renders the
    template without a layout.
    """

    layout: str | None = None


def template_context(data: Any) -> dict[str, Any]:
    """Expose page data to a template.

    The whole object is available as 'page'; fields of pydantic models and
    keys of mappings are also available by name.
    """
    if isinstance(data, BaseModel):
        context = {name: getattr(data, name) for name in type(data).model_fields}
    elif isinstance(data, Mapping):
        context = {str(key): value for key, value in data.items()}
    else:
        context = {}
    context["page"] = data
    return context


class Renderer:
    """Thread-safe facade over the template engine's HTML and JSON output."""

    def __init__(self, settings: Settings, assets: AssetLoader, helpers: HelperRegistry):
        self._default_layout = settings.default_layout or ""
        self._template_loader = AssetTemplateLoader(
            assets,
            prefix=settings.templates_dir,
            extension=settings.template_extension,
        )
        self._environment = Environment(
            loader=self._template_loader,
            autoescape=select_autoescape(default=True, default_for_string=True),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._environment.globals.update(helpers)
        # Built-in filters such as "last" keep their Jinja2 meaning
        self._environment.filters.update(
            {name: helper for name, helper in helpers.items() if name not in self._environment.filters}
        )
        self._html_lock = threading.Lock()
        self._json_lock = threading.Lock()

    def list_templates(self) -> list[str]:
        return self._template_loader.list_templates()

    def page(self, writer: ResponseWriter, page_data: Any, template_name: str) -> None:
        """Render a page as HTML, falling back to a JSON error body.

        Never raises: a failed render writes {"error": message} with status
        500, and a failure of that fallback is only logged.
        """
        try:
            self.html(writer, 200, template_name, page_data)
        except TemplateRenderException as e:
            log_with_context(
                logger,
                "error",
                "failed to render template",
                template=template_name,
                error=e.message,
                error_code=e.code.value,
                event_type="template_render_error",
            )
            try:
                self.json(writer, 500, ErrorResponse(error=e.message))
            except JSONRenderException as json_error:
                log_with_context(
                    logger,
                    "error",
                    "failed to render error response",
                    template=template_name,
                    error=json_error.message,
                    event_type="error_response_render_error",
                )
            return

        log_with_context(
            logger,
            "info",
            "rendered template",
            template=template_name,
            event_type="template_rendered",
        )

    def render_response(self, page_data: Any, template_name: str) -> Response:
        """Render a page into a Starlette response for a route handler."""
        writer = BufferedResponseWriter()
        self.page(writer, page_data, template_name)
        return writer.to_response()

    def _render_template(self, template_name: str, context: dict[str, Any]) -> str:
        try:
            template = self._environment.get_template(template_name)
        except TemplateNotFound as e:
            raise TemplateNotFoundException(template_name) from e
        return template.render(context)

    def html(
        self,
        writer: ResponseWriter,
        status: int,
        template_name: str,
        binding: Any,
        options: HTMLOptions | None = None,
    ) -> None:
        """Render a named template with its binding and write it as HTML.

        The template is fully rendered before anything is written, so a
        failure leaves the writer untouched.

        Raises:
            TemplateNotFoundException: If the template or layout is missing
            TemplateRenderException: If the template fails to execute
        """
        layout = self._default_layout
        if options is not None and options.layout is not None:
            layout = options.layout

        with self._html_lock:
            context = template_context(binding)
            try:
                output = self._render_template(template_name, context)
                if layout:
                    output = self._render_template(layout, {**context, "content": Markup(output)})
            except TemplateRenderException:
                raise
            except Exception as e:
                raise TemplateRenderException(
                    f"template {template_name}: {e}",
                    details={"template": template_name, "error_type": type(e).__name__},
                ) from e

            writer.write_header(status, HTML_CONTENT_TYPE)
            writer.write(output.encode("utf-8"))

    def json(self, writer: ResponseWriter, status: int, value: Any) -> None:
        """Serialize a value as JSON and write it.

        Raises:
            JSONRenderException: If the value cannot be encoded
        """
        with self._json_lock:
            try:
                body = json.dumps(jsonable_encoder(value), ensure_ascii=False, allow_nan=False)
            except (TypeError, ValueError) as e:
                raise JSONRenderException(
                    f"failed to encode JSON: {e}",
                    details={"value_type": type(value).__name__},
                ) from e

            writer.write_header(status, JSON_CONTENT_TYPE)
            writer.write(body.encode("utf-8"))
