"""Per-language message resolution.

A Localiser resolves message keys for one language, falling back to the
default language's messages. Plural forms follow the CLDR rules of the
language the message was found in; message text is rendered with a
sandboxed Jinja2 environment so arguments can be interpolated.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from babel import Locale, UnknownLocaleError
from jinja2 import Template, TemplateSyntaxError
from jinja2.sandbox import SandboxedEnvironment

from page_renderer.exceptions import ConfigurationException, MissingMessageException
from page_renderer.localisation.catalog import Message, MessageCatalog
from page_renderer.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

ARGUMENT_NAME_FORMAT = "arg{index}"


def template_arguments(arguments: Iterable[Any]) -> dict[str, str]:
    """Name positional arguments arg0, arg1, ... for message templates."""
    return {ARGUMENT_NAME_FORMAT.format(index=index): str(argument) for index, argument in enumerate(arguments)}


def _plural_rule(language: str):
    try:
        return Locale.parse(language).plural_form
    except (UnknownLocaleError, ValueError) as e:
        log_with_context(
            logger,
            "warning",
            "No plural rules for language, using 'other' for every count",
            language=language,
            error=str(e),
            event_type="plural_rule_missing",
        )
        return lambda count: "other"


class Localiser:
    """Resolve message keys for a single language.

    Message templates are compiled on construction; nothing is mutated
    afterwards, so one instance is shared by all requests.
    """

    def __init__(
        self,
        language: str,
        catalog: MessageCatalog,
        default_language: str,
        environment: SandboxedEnvironment,
    ):
        self.language = language
        self.default_language = default_language
        self._search_order = (language,) if language == default_language else (language, default_language)
        self._catalog = catalog
        self._plural_rules = MappingProxyType({code: _plural_rule(code) for code in self._search_order})
        self._templates = MappingProxyType(self._compile(environment))

    def _compile(self, environment: SandboxedEnvironment) -> dict[tuple[str, str, str], Template]:
        templates = {}
        for code in self._search_order:
            for key, message in self._catalog.messages(code).items():
                for category, text in message.forms.items():
                    if "{" not in text:
                        continue
                    try:
                        templates[(code, key, category)] = environment.from_string(text)
                    except TemplateSyntaxError as e:
                        log_with_context(
                            logger,
                            "error",
                            "Invalid message template, rendering it as plain text",
                            language=code,
                            key=key,
                            error=str(e),
                            event_type="locale_message_invalid",
                        )
        return templates

    def _find(self, key: str) -> tuple[str, Message] | None:
        for code in self._search_order:
            message = self._catalog.lookup(code, key)
            if message is not None:
                return code, message
        return None

    def localise(self, key: str, plural_count: int | None = None, data: Mapping[str, Any] | None = None) -> str:
        """Resolve a message key to display text.

        Args:
            key: Message id
            plural_count: Count selecting the plural form, None for 'other'
            data: Values available to the message template

        Raises:
            MissingMessageException: If neither this language nor the
                default language has the message
        """
        found = self._find(key)
        if found is None:
            raise MissingMessageException(key, self.language)
        code, message = found

        category = "other" if plural_count is None else self._plural_rules[code](abs(plural_count))
        text = message.form(category)
        if text is None:
            raise MissingMessageException(key, self.language)

        form = category if category in message.forms else "other"
        template = self._templates.get((code, key, form))
        if template is None:
            return text
        return template.render(**(data or {}))


class LocaleResolver:
    """Localisers for every supported language, keyed by language code."""

    def __init__(self, catalog: MessageCatalog, supported_languages: Iterable[str], default_language: str):
        self.catalog = catalog
        self.supported_languages = tuple(supported_languages)
        self.default_language = default_language
        if default_language not in self.supported_languages:
            raise ConfigurationException(
                f"default language {default_language!r} is not a supported language",
                details={"supported_languages": list(self.supported_languages)},
            )
        environment = SandboxedEnvironment(autoescape=False, keep_trailing_newline=True)
        self._localisers = MappingProxyType(
            {
                language: Localiser(language, catalog, default_language, environment)
                for language in self.supported_languages
            }
        )

    def localiser(self, language: str | None) -> Localiser:
        """Return the localiser for a language, or the default language's."""
        if not language:
            return self._localisers[self.default_language]

        localiser = self._localisers.get(language)
        if localiser is None:
            log_with_context(
                logger,
                "warning",
                "Language not supported, using default language",
                language=language,
                default_language=self.default_language,
                event_type="language_not_supported",
            )
            return self._localisers[self.default_language]
        return localiser

    def localise(self, key: str, language: str | None, plural_count: int | None, *arguments: Any) -> str:
        """Localise a message key for a language.

        Positional arguments reach the message as arg0, arg1, ...

        Raises:
            MissingMessageException: If the key is unknown
        """
        if not key:
            log_with_context(
                logger,
                "error",
                "no locale look up key provided",
                language=language,
                event_type="locale_key_missing",
            )
            return ""

        return self.localiser(language).localise(key, plural_count, template_arguments(arguments))
