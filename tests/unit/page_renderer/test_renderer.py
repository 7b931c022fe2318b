"""Unit tests for the HTML and JSON rendering gateway."""

import json
import logging
import threading
import time
from unittest.mock import patch

import pytest
from fastapi.encoders import jsonable_encoder

from page_renderer.assets import DirectoryAssetLoader
from page_renderer.exceptions import ErrorCode, JSONRenderException, TemplateNotFoundException, TemplateRenderException
from page_renderer.models import ErrorResponse
from page_renderer.views.renderer import (
    HTML_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    HTMLOptions,
    Renderer,
    template_context,
)
from page_renderer.views.response_writer import BufferedResponseWriter


def body_text(writer: BufferedResponseWriter) -> str:
    return writer.body.decode("utf-8")


class TestTemplateContext:
    """Tests for template_context."""

    def test_model_fields_are_top_level(self, article_page):
        context = template_context(article_page)

        assert context["uri"] == "/economy/gdp"
        assert context["count"] == 2
        assert context["page"] is article_page

    def test_mapping_keys_are_top_level(self):
        data = {"title": "Hello"}

        assert template_context(data) == {"title": "Hello", "page": data}

    def test_other_values_only_as_page(self):
        assert template_context(42) == {"page": 42}


class TestPage:
    """Tests for Renderer.page."""

    def test_renders_page_inside_layout(self, renderer, article_page):
        """Test a successful render writes HTML with status 200."""
        writer = BufferedResponseWriter()

        renderer.page(writer, article_page, "article")

        html = body_text(writer)
        assert writer.status_code == 200
        assert writer.content_type == HTML_CONTENT_TYPE
        assert html.startswith('<html lang="en">')
        assert '<p class="count">2 datasets</p>' in html
        assert '<p class="released">02 January 2019</p>' in html
        assert '<p class="size">1.5 KB</p>' in html

    def test_escapes_page_text(self, renderer, article_page):
        """Test page values are HTML escaped in the page and the layout."""
        writer = BufferedResponseWriter()

        renderer.page(writer, article_page, "article")

        html = body_text(writer)
        assert "<h1>GDP &lt;first estimate&gt;</h1>" in html
        assert "<title>GDP &lt;first estimate&gt;</title>" in html
        assert "<first estimate>" not in html

    def test_trusted_helpers_are_not_escaped(self, renderer, article_page):
        """Test markdown output and legacy links are written raw."""
        writer = BufferedResponseWriter()

        renderer.page(writer, article_page, "article")

        html = body_text(writer)
        assert "<h2>Summary</h2>" in html
        assert "<strong>bold</strong>" in html
        assert '<a href="/file?uri=/economy/gdp/data.csv">Download file</a>' in html

    def test_welsh_page(self, renderer, article_page):
        """Test page language drives the messages."""
        writer = BufferedResponseWriter()

        renderer.page(writer, article_page.model_copy(update={"language": "cy"}), "article")

        html = body_text(writer)
        assert '<p class="count">2 two</p>' in html
        assert "Download file" in html

    def test_helper_failure_writes_json_error(self, renderer, article_page, caplog):
        """Test a failing helper produces a JSON error body with status 500."""
        writer = BufferedResponseWriter()

        with caplog.at_level(logging.ERROR):
            renderer.page(writer, article_page.model_copy(update={"size": "abc"}), "article")

        assert writer.status_code == 500
        assert writer.content_type == JSON_CONTENT_TYPE
        error = json.loads(writer.body)["error"]
        assert "not a number" in error
        assert "<h1>" not in body_text(writer)
        assert "failed to render template" in caplog.text

    def test_missing_template_writes_json_error(self, renderer, article_page):
        """Test an unknown template name produces a JSON error body."""
        writer = BufferedResponseWriter()

        renderer.page(writer, article_page, "missing")

        assert writer.status_code == 500
        assert json.loads(writer.body) == {"error": "template not found: missing"}

    def test_failed_fallback_is_only_logged(self, renderer, article_page, caplog):
        """Test page never raises even if the JSON fallback fails."""
        writer = BufferedResponseWriter()

        with patch.object(renderer, "json", side_effect=JSONRenderException("failed to encode JSON: boom")):
            with caplog.at_level(logging.ERROR):
                renderer.page(writer, article_page, "missing")

        assert writer.header_written is False
        assert writer.body == b""
        assert "failed to render error response" in caplog.text

    def test_render_response(self, renderer, article_page):
        """Test pages can be rendered straight into a Starlette response."""
        response = renderer.render_response(article_page, "article")

        assert response.status_code == 200
        assert response.headers["content-type"].lower().startswith("text/html")
        assert b"2 datasets" in response.body


class TestHTML:
    """Tests for Renderer.html."""

    def test_layout_can_be_disabled(self, renderer):
        writer = BufferedResponseWriter()

        renderer.html(writer, 201, "fragment", {"title": "<b>x</b>"}, HTMLOptions(layout=""))

        assert writer.status_code == 201
        assert body_text(writer) == "<span>&lt;b&gt;x&lt;/b&gt;</span>"

    def test_builtin_filters_are_kept(self, renderer):
        """Test helpers named like Jinja2 filters do not replace them."""
        writer = BufferedResponseWriter()

        renderer.html(writer, 200, "filters", {"period": "2010 Q1", "items": ["a", "b"]}, HTMLOptions(layout=""))

        assert body_text(writer) == "Jan - Mar 2010|b|2010-q1"

    def test_missing_template_raises(self, renderer):
        writer = BufferedResponseWriter()

        with pytest.raises(TemplateNotFoundException) as exc_info:
            renderer.html(writer, 200, "missing", {})

        assert exc_info.value.code == ErrorCode.TEMPLATE_NOT_FOUND
        assert writer.header_written is False

    def test_missing_layout_raises(self, renderer):
        writer = BufferedResponseWriter()

        with pytest.raises(TemplateNotFoundException, match="template not found: nolayout"):
            renderer.html(writer, 200, "fragment", {"title": "x"}, HTMLOptions(layout="nolayout"))

    def test_undefined_values_fail(self, renderer):
        """Test a binding without the fields a template uses fails the render."""
        writer = BufferedResponseWriter()

        with pytest.raises(TemplateRenderException) as exc_info:
            renderer.html(writer, 200, "fragment", {}, HTMLOptions(layout=""))

        assert exc_info.value.code == ErrorCode.TEMPLATE_ERROR
        assert writer.body == b""

    def test_list_templates(self, renderer):
        assert renderer.list_templates() == ["article", "filters", "fragment", "main"]


class TestJSON:
    """Tests for Renderer.json."""

    def test_writes_json(self, renderer):
        writer = BufferedResponseWriter()

        renderer.json(writer, 404, {"error": "café", "ids": (1, 2)})

        assert writer.status_code == 404
        assert writer.content_type == JSON_CONTENT_TYPE
        assert json.loads(writer.body) == {"error": "café", "ids": [1, 2]}

    def test_writes_models(self, renderer):
        writer = BufferedResponseWriter()

        renderer.json(writer, 500, ErrorResponse(error="boom"))

        assert json.loads(writer.body) == {"error": "boom"}

    def test_unencodable_value_raises(self, renderer):
        writer = BufferedResponseWriter()

        with pytest.raises(JSONRenderException) as exc_info:
            renderer.json(writer, 200, object())

        assert exc_info.value.code == ErrorCode.JSON_ENCODE_ERROR
        assert writer.header_written is False

    @pytest.mark.parametrize("number", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_numbers_raise(self, renderer, number):
        """Test NaN and infinity are rejected rather than written as invalid JSON."""
        writer = BufferedResponseWriter()

        with pytest.raises(JSONRenderException):
            renderer.json(writer, 200, {"value": number})

        assert writer.header_written is False
        assert writer.body == b""


class TestConcurrency:
    """Tests for render serialization."""

    @pytest.fixture
    def tracked_renderer(self, settings, assets_dir, helpers):
        (assets_dir / "templates" / "tracked.html").write_text("{{ tracked() }}", encoding="utf-8")
        state = {"active": 0, "max_active": 0, "gate": threading.Event(), "entered": threading.Event()}
        lock = threading.Lock()

        def tracked():
            with lock:
                state["active"] += 1
                state["max_active"] = max(state["max_active"], state["active"])
            state["entered"].set()
            if state.get("block"):
                state["gate"].wait(timeout=5)
            else:
                time.sleep(0.01)
            with lock:
                state["active"] -= 1
            return "ok"

        renderer = Renderer(settings, DirectoryAssetLoader(assets_dir), {**helpers, "tracked": tracked})
        return renderer, state

    def test_html_renders_are_serialized(self, tracked_renderer):
        """Test concurrent HTML renders never overlap."""
        renderer, state = tracked_renderer
        writers = [BufferedResponseWriter() for _ in range(8)]

        threads = [
            threading.Thread(target=renderer.html, args=(writer, 200, "tracked", {}, HTMLOptions(layout="")))
            for writer in writers
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert state["max_active"] == 1
        assert all(writer.body == b"ok" for writer in writers)

    def test_json_does_not_wait_for_html(self, tracked_renderer):
        """Test a JSON render completes while an HTML render is in progress."""
        renderer, state = tracked_renderer
        state["block"] = True
        html_writer = BufferedResponseWriter()
        thread = threading.Thread(
            target=renderer.html, args=(html_writer, 200, "tracked", {}, HTMLOptions(layout=""))
        )
        thread.start()
        try:
            assert state["entered"].wait(timeout=5)

            json_writer = BufferedResponseWriter()
            renderer.json(json_writer, 200, {"status": "ok"})

            assert json.loads(json_writer.body) == {"status": "ok"}
            assert html_writer.header_written is False
        finally:
            state["gate"].set()
            thread.join(timeout=5)

        assert html_writer.body == b"ok"

    def test_json_renders_are_serialized(self, renderer):
        """Test concurrent JSON renders never overlap."""
        state = {"active": 0, "max_active": 0}
        lock = threading.Lock()

        def slow_encoder(value):
            with lock:
                state["active"] += 1
                state["max_active"] = max(state["max_active"], state["active"])
            time.sleep(0.01)
            with lock:
                state["active"] -= 1
            return jsonable_encoder(value)

        writers = [BufferedResponseWriter() for _ in range(6)]
        with patch("page_renderer.views.renderer.jsonable_encoder", side_effect=slow_encoder):
            threads = [
                threading.Thread(target=renderer.json, args=(writer, 200, {"index": index}))
                for index, writer in enumerate(writers)
            ]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join(timeout=10)

        assert state["max_active"] == 1
        assert [json.loads(writer.body) for writer in writers] == [{"index": index} for index in range(6)]
