"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_ROOT = Path(__file__).resolve().parents[1]

# STATIC_BASE value that makes the app serve ASSETS_DIR itself
LOCAL_STATIC_BASE = "/assets"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="forbid",
    )

    PROJECT_NAME: str = "Todo Server"
    VERSION: str = "0.1.0"
    LOG_LEVEL: str = Field(default="INFO", description="Root logging level")

    # HTTP
    HOST: str = Field(default="127.0.0.1", description="Interface the launcher binds to")
    PORT: int = Field(default=8080, description="Port the launcher binds to")

    # Static assets
    STATIC_BASE: str = Field(
        default="/static",
        description=(
            "URL prefix used by the page for CSS/JS. "
            "Set to '/assets' to have the app serve ASSETS_DIR itself; "
            "any other value is treated as an external asset host or prefix."
        ),
    )
    ASSETS_DIR: str = Field(
        default=str(_PACKAGE_ROOT / "www" / "assets"),
        description="Directory served under /assets when STATIC_BASE is '/assets'",
    )

    # Templates
    TEMPLATES_DIR: str = Field(
        default=str(_PACKAGE_ROOT / "www" / "templates"),
        description="Directory holding the page and fragment templates",
    )
    TEMPLATE_RELOAD: bool = Field(
        default=False,
        description="Re-parse template files on every render (development convenience)",
    )

    # Database
    DATABASE_URL: str = Field(
        default="sqlite:///./todoapp.db",
        description="Database connection URL",
    )

    @property
    def serve_assets(self) -> bool:
        return self.STATIC_BASE == LOCAL_STATIC_BASE


def get_settings() -> Settings:
    """Build settings from the environment (and .env when present)."""
    return Settings()
