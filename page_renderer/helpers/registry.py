"""The fixed set of helper functions templates can call."""

from collections.abc import Callable, Mapping
from functools import partial
from types import MappingProxyType
from typing import Any

from page_renderer.config import Settings
from page_renderer.exceptions import MissingMessageException
from page_renderer.helpers import formatting, sequences, text
from page_renderer.localisation.domains import domain_set_lang
from page_renderer.localisation.localiser import LocaleResolver
from page_renderer.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

HelperRegistry = Mapping[str, Callable[..., Any]]


def make_localise_helper(resolver: LocaleResolver, strict: bool = False) -> Callable[..., str]:
    """Wrap the resolver for templates.

    Unknown keys render as an empty string unless strict, in which case the
    MissingMessageException fails the render.
    """

    def localise(key: str, language: str | None, plural_count: int | None = 1, *arguments: Any) -> str:
        try:
            return resolver.localise(key, language, plural_count, *arguments)
        except MissingMessageException as e:
            log_with_context(
                logger,
                "error",
                "Localisation key not found",
                key=e.key,
                language=e.language,
                strict=strict,
                event_type="locale_message_missing",
            )
            if strict:
                raise
            return ""

    return localise


def build_helper_registry(resolver: LocaleResolver, settings: Settings) -> HelperRegistry:
    """Build the read-only helper table installed into the template engine.

    Helpers are exposed as globals ('{{ slug(title) }}') and, unless the name
    is a built-in Jinja2 filter, as filters ('{{ title | slug }}'). The
    range helper is 'loop_range' because 'loop' is reserved inside for
    blocks.
    """
    helpers: dict[str, Callable[..., Any]] = {
        "human_size": formatting.human_size,
        "safe_html": text.safe_html,
        "date_format": partial(formatting.date_format, timezone=settings.display_timezone),
        "date_format_yyyymmdd": partial(formatting.date_format_yyyymmdd, timezone=settings.display_timezone),
        "date_period_format": formatting.date_period_format,
        "last": sequences.last,
        "loop_range": sequences.loop,
        "subtract": sequences.subtract,
        "slug": text.slug,
        "legacy_dataset_download_uri": text.legacy_dataset_download_uri,
        "markdown": text.markdown,
        "localise": make_localise_helper(resolver, strict=settings.strict_localisation),
        "domain_set_lang": partial(
            domain_set_lang,
            supported_languages=settings.supported_languages,
            default_language=settings.default_language,
        ),
        "has_field": sequences.has_field,
        "not_last_item": sequences.not_last_item,
        "concatenate_strings": text.concatenate_strings,
        "truncate_to_maximum_characters": text.truncate_to_maximum_characters,
    }
    return MappingProxyType(helpers)
