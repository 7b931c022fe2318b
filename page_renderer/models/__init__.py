"""Page renderer models"""

from page_renderer.models.base_models import ErrorResponse, HealthResponse, ReadinessResponse
from page_renderer.models.page import Breadcrumb, Metadata, Page

__all__ = [
    "Breadcrumb",
    "ErrorResponse",
    "HealthResponse",
    "Metadata",
    "Page",
    "ReadinessResponse",
]
