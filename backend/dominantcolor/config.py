"""
Dominant Color Service Configuration
Manages environment variables and defaults for the HTTP service.
"""
import os


class Config:
    """Configuration class for the dominant color service."""

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("DOMINANTCOLOR_MAX_FILE_MB", "10"))

    # Logging
    LOG_LEVEL: str = os.environ.get("DOMINANTCOLOR_LOG_LEVEL", "INFO")

    # Observability
    METRICS_ENABLED: bool = bool(int(os.environ.get("DOMINANTCOLOR_METRICS_ENABLED", "1")))

    # Service identity
    SERVICE_NAME: str = "dominantcolor"
    VERSION: str = "1.0.0"

    # Supported upload formats (everything the decoder registers)
    SUPPORTED_MIME_TYPES = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/bmp",
        "image/tiff",
        "image/webp",
    ]

    @classmethod
    def max_file_bytes(cls) -> int:
        """Upload size limit in bytes."""
        return cls.MAX_FILE_MB * 1024 * 1024

    @classmethod
    def validate_mime_type(cls, content_type: str) -> bool:
        """Validate upload content type."""
        return content_type in cls.SUPPORTED_MIME_TYPES


# Global config instance
config = Config()
