"""Common page fields read by the template helpers.

Service-specific pages subclass Page and add their own fields; the renderer
only relies on the fields declared here.
"""

from pydantic import BaseModel, ConfigDict, Field


class Metadata(BaseModel):
    """HTML head metadata."""

    title: str = ""
    description: str = ""
    keywords: list[str] = Field(default_factory=list)


class Breadcrumb(BaseModel):
    """One link of the breadcrumb trail."""

    uri: str
    title: str


class Page(BaseModel):
    """Fields shared by every rendered page."""

    model_config = ConfigDict(frozen=True)

    type: str = ""
    uri: str = ""
    language: str = "en"
    site_domain: str = ""
    metadata: Metadata = Field(default_factory=Metadata)
    breadcrumb: list[Breadcrumb] = Field(default_factory=list)
    feature_flags: dict[str, bool] = Field(default_factory=dict)

    def has_field(self, name: str) -> bool:
        """Return True if this page type declares the field."""
        return name in type(self).model_fields
