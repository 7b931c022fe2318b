"""Message catalog backed by TOML locale bundles.

Bundles are named 'locales/{bundle}.{language}.toml'. A message is either a
plain string or a table of CLDR plural forms:

    Search = "Search"

    [Dataset]
    description = "Label for dataset counts"
    one = "{{ arg0 }} dataset"
    other = "{{ arg0 }} datasets"

Tables holding no plural form nest message keys with a dotted prefix.
"""

import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from page_renderer.exceptions import AssetNotFoundException
from page_renderer.logging_config import get_logger, log_with_context
from page_renderer.protocols import AssetLoader

logger = get_logger(__name__)

PLURAL_FORMS = ("zero", "one", "two", "few", "many", "other")

LOCALE_PATH_FORMAT = "locales/{bundle}.{language}.toml"


@dataclass(frozen=True)
class Message:
    """A localised message with one template string per plural form."""

    key: str
    forms: Mapping[str, str]
    description: str = ""

    def form(self, category: str) -> str | None:
        """Return the text for a plural category, falling back to 'other'."""
        if category in self.forms:
            return self.forms[category]
        return self.forms.get("other")


@dataclass(frozen=True)
class MessageCatalog:
    """Read-only messages for every supported language."""

    languages: Mapping[str, Mapping[str, Message]] = field(default_factory=dict)

    def messages(self, language: str) -> Mapping[str, Message]:
        return self.languages.get(language, MappingProxyType({}))

    def lookup(self, language: str, key: str) -> Message | None:
        return self.messages(language).get(key)

    def message_counts(self) -> dict[str, int]:
        return {language: len(messages) for language, messages in self.languages.items()}


def _is_message_table(value: Mapping[str, Any]) -> bool:
    return any(name in value for name in PLURAL_FORMS)


def parse_bundle(payload: Mapping[str, Any], prefix: str = "") -> dict[str, Message]:
    """Turn a decoded TOML bundle into messages keyed by message id.

    Raises:
        ValueError: If a message table holds a non-string plural form
    """
    messages: dict[str, Message] = {}
    for name, value in payload.items():
        key = f"{prefix}{name}"
        if isinstance(value, str):
            messages[key] = Message(key=key, forms=MappingProxyType({"other": value}))
        elif isinstance(value, Mapping) and _is_message_table(value):
            forms = {}
            for category in PLURAL_FORMS:
                if category not in value:
                    continue
                if not isinstance(value[category], str):
                    raise ValueError(f"plural form {category!r} of message {key!r} must be a string")
                forms[category] = value[category]
            messages[key] = Message(
                key=key,
                forms=MappingProxyType(forms),
                description=str(value.get("description", "")),
            )
        elif isinstance(value, Mapping):
            messages.update(parse_bundle(value, prefix=f"{key}."))
        else:
            raise ValueError(f"message {key!r} must be a string or a table")
    return messages


def _load_bundle(assets: AssetLoader, asset_name: str) -> dict[str, Message] | None:
    try:
        raw = assets.load(asset_name)
    except AssetNotFoundException as e:
        log_with_context(
            logger,
            "error",
            "failed to get locale file",
            asset=asset_name,
            error=str(e),
            event_type="locale_bundle_missing",
        )
        return None

    try:
        payload = tomllib.loads(raw.decode("utf-8"))
        return parse_bundle(payload)
    except (UnicodeDecodeError, tomllib.TOMLDecodeError, ValueError) as e:
        log_with_context(
            logger,
            "error",
            "failed to parse locale file",
            asset=asset_name,
            error=str(e),
            error_type=type(e).__name__,
            event_type="locale_bundle_invalid",
        )
        return None


def load_catalog(assets: AssetLoader, languages: Iterable[str], bundles: Iterable[str]) -> MessageCatalog:
    """Load every bundle of every language into a read-only catalog.

    A missing or malformed bundle is logged and skipped; its language stays
    in the catalog with whatever the other bundles provide. Later bundles
    override keys of earlier ones.
    """
    bundles = tuple(bundles)
    loaded: dict[str, Mapping[str, Message]] = {}

    for language in languages:
        messages: dict[str, Message] = {}
        for bundle in bundles:
            asset_name = LOCALE_PATH_FORMAT.format(bundle=bundle, language=language)
            bundle_messages = _load_bundle(assets, asset_name)
            if bundle_messages is None:
                continue
            messages.update(bundle_messages)
        loaded[language] = MappingProxyType(messages)

        log_with_context(
            logger,
            "info",
            "Locale messages loaded",
            language=language,
            message_count=len(messages),
            event_type="locale_loaded",
        )

    return MessageCatalog(languages=MappingProxyType(loaded))
