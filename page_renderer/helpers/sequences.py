"""Helpers for iterating and indexing inside templates."""

from collections.abc import Mapping, Sized
from typing import Any

from pydantic import BaseModel

from page_renderer.protocols import PageData


def last(index: int, sequence: Sized) -> bool:
    """Return True if index is the last position of sequence."""
    return index == len(sequence) - 1


def loop(start: int, stop: int) -> list[int]:
    """Return the integers from start up to, but not including, stop."""
    return list(range(start, stop))


def subtract(x: int, y: int) -> int:
    return x - y


def not_last_item(length: int, index: int) -> bool:
    """Return True while index is before the last item.

    Used in JSON-LD partials to decide whether a comma follows an item.
    """
    return index < length - 1


def has_field(data: Any, name: str) -> bool:
    """Return True if the page data exposes a field called name.

    Page data answers through PageData.has_field when it implements it,
    pydantic models through their declared fields and mappings through
    their keys. Anything else has no fields.
    """
    if isinstance(data, PageData):
        return data.has_field(name)
    if isinstance(data, BaseModel):
        return name in type(data).model_fields
    if isinstance(data, Mapping):
        return name in data
    return False
