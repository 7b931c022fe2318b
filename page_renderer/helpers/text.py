"""Text helpers: slugs, markdown, truncation and raw links."""

import re

from markdown_it import MarkdownIt
from markupsafe import Markup
from slugify import slugify

LEGACY_DATASET_URI_FORMAT = "/file?uri={page_uri}/{filename}"

# Stored markdown often has no space after heading hashes (e.g. '##Title')
HEADING_PATTERN = re.compile(r"(##+)([^\s#])")

SLUG_REPLACEMENTS = [["&", "and"], ["@", "at"]]

_markdown = MarkdownIt("commonmark", {"html": True}).enable(["table", "strikethrough"])


def safe_html(text: str) -> Markup:
    """Mark text as trusted HTML so autoescaping leaves it alone."""
    return Markup(text)


def slug(text: str) -> str:
    """Build a lowercase, hyphen separated, ASCII slug."""
    return slugify(text, replacements=SLUG_REPLACEMENTS)


def legacy_dataset_download_uri(page_uri: str, filename: str) -> Markup:
    """Build the download link of a legacy dataset file.

    Building the link in a template attribute escapes the query string, so
    the link is built here and returned unescaped.
    """
    return Markup(LEGACY_DATASET_URI_FORMAT.format(page_uri=page_uri, filename=filename))


def markdown(source: str) -> Markup:
    """Render markdown to HTML, repairing '##Title' style headings first."""
    lines = [HEADING_PATTERN.sub(r"\1 \2", line) + "\n" for line in source.split("\n")]
    return Markup(_markdown.render("".join(lines)))


def concatenate_strings(*tokens: str) -> str:
    return "".join(tokens)


def truncate_to_maximum_characters(text: str, max_length: int) -> str:
    """Shorten text to max_length characters followed by '...'.

    Text shorter than max_length is returned as is, and so is any text when
    max_length is negative.
    """
    if max_length < 0 or len(text) < max_length:
        return text
    return text[:max_length].rstrip() + "..."
