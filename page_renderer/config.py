from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Renderer settings with validation.

    Settings are frozen once constructed: the language set, bundle list and
    asset locations are process-wide constants shared by every request.

    Uses Pydantic v2 API:
    - model_config with SettingsConfigDict
    - @field_validator / @model_validator decorators
    """

    # API server settings
    api_host: str = Field(default="127.0.0.1", min_length=1, description="API server host")
    api_port: int = Field(ge=1, le=65535, default=8000, description="API server port")
    log_level: str = Field(default="INFO", description="Root log level")

    # Site settings
    site_domain: str = Field(default="localhost", min_length=1, description="Public site domain")

    # Asset settings
    assets_path: Path = Field(default=BASE_DIR / "assets", description="Root directory of templates and locales")
    templates_dir: str = Field(default="templates", description="Template folder inside the assets root")
    template_extension: str = Field(default=".html", description="File extension appended to template names")
    default_layout: str | None = Field(default="main", description="Layout wrapping every page, None to disable")

    # Localisation settings
    supported_languages: tuple[str, ...] = Field(default=("en", "cy"), min_length=1)
    default_language: str = Field(default="en", min_length=2)
    locale_bundles: tuple[str, ...] = Field(default=("core", "service"))
    display_timezone: str = Field(default="Europe/London", description="Timezone dates are displayed in")
    strict_localisation: bool = Field(
        default=False,
        description="Fail the render on unknown message keys instead of rendering an empty string",
    )

    model_config = SettingsConfigDict(
        env_file=Path(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
        frozen=True,
    )

    @field_validator("template_extension", mode="after")
    @classmethod
    def validate_template_extension(cls, v: str) -> str:
        """Ensure the extension carries its leading dot."""
        v = v.strip()
        if v and not v.startswith("."):
            raise ValueError("template_extension must start with '.'")
        return v

    @field_validator("supported_languages", mode="after")
    @classmethod
    def validate_supported_languages(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Normalise language codes to lower case without blanks."""
        languages = tuple(code.strip().lower() for code in v if code.strip())
        if not languages:
            raise ValueError("supported_languages must name at least one language")
        return languages

    @model_validator(mode="after")
    def validate_default_language(self) -> "Settings":
        """Ensure the default language is one of the supported languages."""
        if self.default_language not in self.supported_languages:
            raise ValueError(
                f"default_language {self.default_language!r} is not in supported_languages {self.supported_languages}"
            )
        return self


# Singleton settings instance (cached for performance)
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get singleton Settings instance for dependency injection.

    Returns:
        Cached Settings instance
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
