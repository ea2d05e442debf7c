"""Environment-based configuration for FrameFit."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_pictures_dir() -> Path:
    return Path.home() / ".framefit" / "pictures"


class Settings(BaseSettings):
    """Application settings loaded from FRAMEFIT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FRAMEFIT_",
        case_sensitive=False,
    )

    # Inference endpoint (required, no default)
    endpoint: HttpUrl

    # Bearer token sent to the endpoint (None = no Authorization header)
    api_key: str | None = None

    # HTTP timeouts in seconds
    connect_timeout: float = Field(default=30.0, gt=0)
    read_timeout: float = Field(default=30.0, gt=0)
    write_timeout: float = Field(default=30.0, gt=0)

    # Encoding
    jpeg_quality: int = Field(default=90, ge=1, le=100)
    max_image_pixels: int = Field(default=16_777_216, ge=1)
    max_file_size: int = Field(default=209_715_200, ge=1)

    # Acquisition
    pictures_dir: Path = Field(default_factory=_default_pictures_dir)
    camera_index: int = Field(default=0, ge=0)
    auto_grant: bool = False

    # Presentation
    assets_dir: Path = Path("assets")

    # Workflow
    analyze_on_select: bool = True
    overlap_policy: Literal["reject", "queue"] = "reject"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]
