"""Language scoped canonical URLs.

Welsh pages live on the 'cy.' subdomain while the default language uses
'www.'; URIs arrive inconsistently with or without scheme and host.
"""

import re
from collections.abc import Sequence

from page_renderer.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

ENDPOINT_PATTERN = re.compile(r"https?://[^/]+(.*)")
LANGUAGE_PREFIX_SEPARATORS = "./"


def _strip_language_prefix(url: str, languages: Sequence[str]) -> str:
    for language in languages:
        prefix_length = len(language)
        if len(url) <= prefix_length:
            continue
        if url.startswith(language) and url[prefix_length] in LANGUAGE_PREFIX_SEPARATORS:
            return url[prefix_length + 1 :]
    return url


def domain_set_lang(
    domain: str,
    uri: str,
    language: str,
    supported_languages: Sequence[str] = ("en", "cy"),
    default_language: str = "en",
) -> str:
    """Build the canonical https URL of uri on domain for a language.

    domain_set_lang("example.com", "/about", "cy") gives
    "https://cy.example.com/about"; the default language uses "www.".
    """
    language_supported = language in supported_languages

    # Drop scheme, host and port if the uri carries them
    endpoint = ENDPOINT_PATTERN.search(uri)
    if endpoint:
        uri = endpoint.group(1)

    stripped_url = (domain + uri).removeprefix("https://").removeprefix("www.")
    stripped_url = _strip_language_prefix(stripped_url, supported_languages)

    if not language_supported:
        log_with_context(
            logger,
            "error",
            "language fail",
            language=language,
            default_language=default_language,
            error=f"Language: {language} is not supported resolving to {default_language}",
            event_type="language_not_supported",
        )

    if language == default_language or not language_supported:
        return f"https://www.{stripped_url}"
    return f"https://{language}.{stripped_url}"
