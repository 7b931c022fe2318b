"""Asset loading for templates and locale bundles."""

from collections.abc import Callable
from pathlib import Path

from jinja2 import BaseLoader, Environment, TemplateNotFound

from page_renderer.exceptions import AssetNotFoundException
from page_renderer.logging_config import get_logger, log_with_context
from page_renderer.protocols import AssetLoader

logger = get_logger(__name__)


class DirectoryAssetLoader:
    """Serve assets from a directory tree.

    Asset names are POSIX style paths relative to the root. Names that
    resolve outside the root are treated as missing.
    """

    def __init__(self, root: Path):
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, name: str) -> Path:
        path = (self._root / name).resolve()
        if not path.is_relative_to(self._root) or not path.is_file():
            raise AssetNotFoundException(name, details={"root": str(self._root)})
        return path

    def load(self, name: str) -> bytes:
        path = self._resolve(name)
        return path.read_bytes()

    def names(self) -> list[str]:
        if not self._root.is_dir():
            return []
        return sorted(path.relative_to(self._root).as_posix() for path in self._root.rglob("*") if path.is_file())


class AssetTemplateLoader(BaseLoader):
    """Jinja2 loader reading templates through an AssetLoader.

    Template 'dataset' with prefix 'templates' and extension '.html' is read
    from the asset 'templates/dataset.html'.
    """

    def __init__(self, assets: AssetLoader, prefix: str = "templates", extension: str = ".html"):
        self._assets = assets
        self._prefix = prefix.strip("/")
        self._extension = extension

    def asset_name(self, template: str) -> str:
        name = template if template.endswith(self._extension) else f"{template}{self._extension}"
        return f"{self._prefix}/{name}" if self._prefix else name

    def get_source(self, environment: Environment, template: str) -> tuple[str, str | None, Callable[[], bool] | None]:
        asset_name = self.asset_name(template)
        try:
            source = self._assets.load(asset_name)
        except AssetNotFoundException as e:
            log_with_context(
                logger,
                "debug",
                "Template asset missing",
                template=template,
                asset=asset_name,
                event_type="template_missing",
            )
            raise TemplateNotFound(template) from e

        # Assets are immutable for the process lifetime
        return source.decode("utf-8"), asset_name, lambda: True

    def list_templates(self) -> list[str]:
        prefix = f"{self._prefix}/" if self._prefix else ""
        templates = []
        for name in self._assets.names():
            if name.startswith(prefix) and name.endswith(self._extension):
                templates.append(name[len(prefix) : len(name) - len(self._extension)])
        return sorted(templates)
