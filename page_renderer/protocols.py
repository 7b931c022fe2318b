"""Protocol definitions for the renderer's collaborators."""

from typing import Protocol, runtime_checkable


class AssetLoader(Protocol):
    """Source of bundled assets (templates, locale bundles).

    Implementations must be safe to call from several threads once
    constructed.
    """

    def load(self, name: str) -> bytes:
        """Return the raw bytes of an asset.

        Args:
            name: Slash separated asset name (e.g. 'locales/core.en.toml')

        Raises:
            AssetNotFoundException: If no asset has that name
        """
        ...

    def names(self) -> list[str]:
        """List every asset name the loader can supply."""
        ...


class ResponseWriter(Protocol):
    """Byte sink the renderer writes a response into."""

    def write_header(self, status_code: int, content_type: str) -> None:
        """Record the response status and content type before the body."""
        ...

    def write(self, data: bytes) -> int:
        """Append bytes to the response body."""
        ...


@runtime_checkable
class PageData(Protocol):
    """Capability a page-data object can implement to answer field lookups."""

    def has_field(self, name: str) -> bool:
        """Return True if the page exposes a field with this name."""
        ...
