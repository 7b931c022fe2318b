"""State managers owning application-wide state.

State is built once during startup and torn down at shutdown; between the
two it is read-only. All state managers inherit from StateManager ABC.
"""

import asyncio
from abc import ABC, abstractmethod

from page_renderer.assets import DirectoryAssetLoader
from page_renderer.config import Settings
from page_renderer.exceptions import ConfigurationException, ErrorCode
from page_renderer.helpers.registry import HelperRegistry, build_helper_registry
from page_renderer.localisation.catalog import load_catalog
from page_renderer.localisation.localiser import LocaleResolver
from page_renderer.logging_config import get_logger, log_with_context
from page_renderer.protocols import AssetLoader
from page_renderer.views.renderer import Renderer

logger = get_logger(__name__)


class StateManager(ABC):
    """Base class for all state managers.

    All subclasses must implement lifecycle methods.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the state manager (called during app startup)."""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Cleanup resources (called during app shutdown)."""
        pass


class RenderingContext(StateManager):
    """Owns the locale resolver, helper registry and renderer.

    initialize() loads the message catalog and builds everything that
    depends on it; nothing is rebuilt per request.
    """

    def __init__(self, settings: Settings, assets: AssetLoader | None = None):
        self._settings = settings
        self._assets = assets if assets is not None else DirectoryAssetLoader(settings.assets_path)
        self._resolver: LocaleResolver | None = None
        self._helpers: HelperRegistry | None = None
        self._renderer: Renderer | None = None
        self._lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._renderer is not None

    async def initialize(self) -> None:
        """Load locale bundles and build the renderer (idempotent)."""
        async with self._lock:
            if self._renderer is not None:
                return

            catalog = load_catalog(
                self._assets,
                languages=self._settings.supported_languages,
                bundles=self._settings.locale_bundles,
            )
            resolver = LocaleResolver(
                catalog,
                supported_languages=self._settings.supported_languages,
                default_language=self._settings.default_language,
            )
            helpers = build_helper_registry(resolver, self._settings)

            self._resolver = resolver
            self._helpers = helpers
            self._renderer = Renderer(self._settings, self._assets, helpers)

            log_with_context(
                logger,
                "info",
                "Rendering context initialized",
                languages=list(self._settings.supported_languages),
                helper_count=len(helpers),
                event_type="rendering_context_ready",
            )

    async def cleanup(self) -> None:
        """Drop the renderer and catalog."""
        async with self._lock:
            self._renderer = None
            self._helpers = None
            self._resolver = None

    def _require(self, value, name: str):
        if value is None:
            raise ConfigurationException(
                f"{name} requested before the rendering context was initialized",
                code=ErrorCode.NOT_INITIALIZED,
                status_code=503,
            )
        return value

    @property
    def renderer(self) -> Renderer:
        return self._require(self._renderer, "renderer")

    @property
    def resolver(self) -> LocaleResolver:
        return self._require(self._resolver, "locale resolver")

    @property
    def helpers(self) -> HelperRegistry:
        return self._require(self._helpers, "helper registry")
