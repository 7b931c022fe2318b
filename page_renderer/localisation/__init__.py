"""Locale bundles, message resolution and language scoped URLs."""

from page_renderer.localisation.catalog import Message, MessageCatalog, load_catalog
from page_renderer.localisation.domains import domain_set_lang
from page_renderer.localisation.localiser import LocaleResolver, Localiser

__all__ = [
    "LocaleResolver",
    "Localiser",
    "Message",
    "MessageCatalog",
    "domain_set_lang",
    "load_catalog",
]
