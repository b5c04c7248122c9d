"""Configuration management for the Lumière editorial studio."""

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings


class GenerationConfig(BaseModel):
    """Image generation settings."""
    model: str = "gemini-3-pro-image-preview"
    aspect_ratio: str = "3:4"  # Standard editorial ratio
    image_size: str = "4K"  # Highest resolution tier
    input_mime_type: str = "image/jpeg"  # Used when a payload carries no data URL prefix


class UploadConfig(BaseModel):
    """Upload slot limits."""
    portrait_max_files: int = 1
    product_max_files: int = 3
    max_file_bytes: int = 20 * 1024 * 1024


class StudioConfig(BaseSettings):
    """Main studio configuration."""

    # Sub-configs
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    uploads: UploadConfig = Field(default_factory=UploadConfig)

    # Gemini API key (loaded from .env)
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "google_api_key", "api_key"),
    )

    download_prefix: str = "lumiere-editorial"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = ""
        extra = "ignore"


def load_config() -> StudioConfig:
    """Load configuration from environment and defaults."""
    return StudioConfig()
