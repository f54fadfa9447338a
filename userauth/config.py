"""
User auth service settings.

Extends the base settings with upload configuration.
"""

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Service-specific settings."""

    # ==========================================================================
    # Uploads
    # ==========================================================================
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    UPLOAD_MAX_BYTES: int = 5 * 1024 * 1024  # 5MB


# Global settings instance
settings = Settings()
