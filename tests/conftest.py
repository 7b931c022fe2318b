"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from page_renderer.assets import DirectoryAssetLoader
from page_renderer.config import Settings
from page_renderer.helpers.registry import build_helper_registry
from page_renderer.localisation.catalog import load_catalog
from page_renderer.localisation.localiser import LocaleResolver
from page_renderer.models import Page
from page_renderer.views.renderer import Renderer

TEMPLATES = {
    "main.html": "<html lang=\"{{ language }}\"><title>{{ metadata.title }}</title><body>{{ content }}</body></html>",
    "article.html": (
        "<h1>{{ metadata.title }}</h1>\n"
        "<p class=\"count\">{{ localise('Dataset', language, count, count) }}</p>\n"
        "<p class=\"released\">{{ date_format(release_date) }}</p>\n"
        "<p class=\"size\">{{ human_size(size) }}</p>\n"
        "<a href=\"{{ legacy_dataset_download_uri(uri, 'data.csv') }}\">{{ localise('Download', language, 1) }}</a>\n"
        "<div class=\"body\">{{ markdown(body) }}</div>\n"
    ),
    "fragment.html": "<span>{{ title }}</span>",
    "filters.html": "{{ period | date_period_format }}|{{ items | last }}|{{ slug(period) }}",
}

LOCALES = {
    "core.en.toml": """
SiteName = "Statistics Portal"

[Dataset]
description = "Count of datasets"
one = "{{ arg0 }} dataset"
other = "{{ arg0 }} datasets"

[Only]
English = "Only in English"
""",
    "service.en.toml": """
[Download]
one = "Download file"
other = "Download {{ arg0 }} files"
""",
    "core.cy.toml": """
SiteName = "Porth Ystadegau"

[Dataset]
zero = "{{ arg0 }} zero"
one = "{{ arg0 }} one"
two = "{{ arg0 }} two"
few = "{{ arg0 }} few"
many = "{{ arg0 }} many"
other = "{{ arg0 }} other"
""",
}


class ArticlePage(Page):
    """Page type used across renderer tests."""

    count: int = 2
    release_date: str = "2019-01-02T10:00:00Z"
    size: str = "1536"
    body: str = "##Summary\nSome **bold** text"


def write_assets(root: Path, templates: dict[str, str], locales: dict[str, str]) -> Path:
    for name, source in templates.items():
        path = root / "templates" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
    for name, source in locales.items():
        path = root / "locales" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
    return root


@pytest.fixture
def assets_dir(tmp_path):
    """Asset tree with templates and locale bundles (service.cy.toml missing)."""
    return write_assets(tmp_path / "assets", TEMPLATES, LOCALES)


@pytest.fixture
def asset_loader(assets_dir):
    return DirectoryAssetLoader(assets_dir)


@pytest.fixture
def settings(assets_dir):
    """Settings pointing at the temporary asset tree."""
    return Settings(
        assets_path=assets_dir,
        site_domain="example.com",
        supported_languages=("en", "cy"),
        default_language="en",
    )


@pytest.fixture
def resolver(asset_loader, settings):
    catalog = load_catalog(asset_loader, settings.supported_languages, settings.locale_bundles)
    return LocaleResolver(catalog, settings.supported_languages, settings.default_language)


@pytest.fixture
def helpers(resolver, settings):
    return build_helper_registry(resolver, settings)


@pytest.fixture
def renderer(settings, asset_loader, helpers):
    return Renderer(settings, asset_loader, helpers)


@pytest.fixture
def article_page():
    return ArticlePage(
        type="article",
        uri="/economy/gdp",
        language="en",
        site_domain="example.com",
        metadata={"title": "GDP <first estimate>"},
    )
