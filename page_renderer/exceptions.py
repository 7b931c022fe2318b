"""Custom exceptions for the page renderer with HTTP status codes."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error responses."""

    # Generic errors
    RENDERER_ERROR = "RENDERER_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Rendering errors
    TEMPLATE_ERROR = "TEMPLATE_ERROR"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    JSON_ENCODE_ERROR = "JSON_ENCODE_ERROR"

    # Helper errors
    FORMAT_ERROR = "FORMAT_ERROR"

    # Localisation errors
    LOCALISATION_ERROR = "LOCALISATION_ERROR"
    MESSAGE_NOT_FOUND = "MESSAGE_NOT_FOUND"

    # Asset errors
    ASSET_NOT_FOUND = "ASSET_NOT_FOUND"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"
    NOT_INITIALIZED = "NOT_INITIALIZED"


class RendererException(Exception):
    """Base exception for renderer errors with HTTP status code support.

    All custom exceptions should inherit from this class to ensure
    consistent error handling across the application.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RENDERER_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize renderer exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            status_code: HTTP status code (default 500)
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class TemplateRenderException(RendererException):
    """Template execution failed."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TEMPLATE_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)


class TemplateNotFoundException(TemplateRenderException):
    """Named template (or its layout) does not exist."""

    def __init__(self, template: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"template not found: {template}",
            code=ErrorCode.TEMPLATE_NOT_FOUND,
            details={"template": template, **(details or {})},
        )


class JSONRenderException(RendererException):
    """Value could not be serialized as JSON."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code=ErrorCode.JSON_ENCODE_ERROR,
            status_code=500,
            details=details,
        )


class FormatException(RendererException):
    """A template helper received input it cannot format."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code=ErrorCode.FORMAT_ERROR,
            status_code=500,
            details=details,
        )


class LocalisationException(RendererException):
    """Localisation errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LOCALISATION_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)


class MissingMessageException(LocalisationException):
    """No message exists for a key in the requested or default language."""

    def __init__(self, key: str, language: str):
        super().__init__(
            f'message "{key}" not found in language "{language}"',
            code=ErrorCode.MESSAGE_NOT_FOUND,
            details={"key": key, "language": language},
        )
        self.key = key
        self.language = language


class AssetNotFoundException(RendererException):
    """Asset loader has no resource with the requested name."""

    def __init__(self, asset_name: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"asset not found: {asset_name}",
            code=ErrorCode.ASSET_NOT_FOUND,
            status_code=404,
            details={"asset": asset_name, **(details or {})},
        )
        self.asset_name = asset_name


class ConfigurationException(RendererException):
    """Configuration errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)
