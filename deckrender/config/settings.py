"""
Service settings loaded from environment (DECKRENDER_*) and optional .env.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BrowserBackend = Literal["local", "hosted", "remote"]


class Settings(BaseSettings):
    """Runtime configuration for deckrender."""

    model_config = SettingsConfigDict(
        env_prefix="DECKRENDER_",
        env_file=".env",
        extra="ignore",
    )

    # Server
    host: str = "127.0.0.1"
    port: int = 8300
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # Browser engine
    browser_backend: BrowserBackend = Field(
        default="local",
        description="local: bundled Chromium, hosted: explicit binary with constrained args, "
        "remote: connect to a running browser",
    )
    browser_executable_path: str | None = None
    browser_ws_endpoint: str | None = None
    browser_args: list[str] = Field(default_factory=list)

    # Rendering
    load_timeout_ms: int = Field(default=30000, gt=0)
    render_concurrency: int = Field(default=1, ge=1)
    slide_selector: str = ".slide"

    # Responses
    pdf_filename: str = "document.pdf"
    deck_filename: str = "presentation.pptx"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the process settings, creating them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def init_settings(settings: Settings) -> Settings:
    """Install explicit settings (tests, embedding)."""
    global _settings
    _settings = settings
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
