"""Page renderer: localised HTML pages with a JSON error fallback"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("page-renderer")
except PackageNotFoundError:
    __version__ = "dev"
