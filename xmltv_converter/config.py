from pathlib import Path
import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class ConverterSettings(BaseSettings):
    """Converter settings loaded from environment variables and CLI overrides.

    Validates configuration at startup to catch misconfiguration early.
    """

    guide_source: str | None = None
    output_path: str = "./guide"
    hours_to_convert: float = 8.0
    replacements_json_path: str = "./replacements.json"
    replacements_poster_path: str = "./replacementposters"
    poster_cache_path: str = "./cachedposters"
    fetch_timeout_sec: float = 30.0  # Per image and guide download
    mosaic_jpeg_quality: int = 90
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="XMLTV_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("guide_source")
    @classmethod
    def validate_guide_source(cls, value: str | None) -> str | None:
        """Accept an HTTP/HTTPS URL or a local file path."""
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("guide_source must not be empty")
        if "://" in value and not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"XMLTV source URL must be HTTP/HTTPS: {value}")
        return value

    @field_validator("hours_to_convert")
    @classmethod
    def validate_hours(cls, value: float) -> float:
        """Validate the conversion window is positive."""
        if value <= 0:
            raise ValueError("hours_to_convert must be > 0")
        return value

    @field_validator("fetch_timeout_sec")
    @classmethod
    def validate_fetch_timeout(cls, value: float) -> float:
        """Validate HTTP timeout (seconds)."""
        if value <= 0:
            raise ValueError("fetch_timeout_sec must be > 0")
        return value

    @field_validator("mosaic_jpeg_quality")
    @classmethod
    def validate_jpeg_quality(cls, value: int) -> int:
        """Pillow recommends JPEG quality between 1 and 95."""
        if not 1 <= value <= 95:
            raise ValueError("mosaic_jpeg_quality must be between 1 and 95")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate logging level name."""
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @model_validator(mode="after")
    def validate_paths(self):
        """Validate output and cache paths are not regular files."""
        for name in ("output_path", "replacements_poster_path", "poster_cache_path"):
            path = Path(getattr(self, name))
            if path.exists() and not path.is_dir():
                raise ValueError(f"{name} must be a directory: {path}")
        return self

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  XMLTV Source: %s", self.guide_source or "not set")
        logger.info("  Output: %s", self.output_path)
        logger.info("  Hours To Convert: %s", self.hours_to_convert)
        logger.info("  Replacements: %s (posters in %s)", self.replacements_json_path, self.replacements_poster_path)
        logger.info("  Poster Cache: %s", self.poster_cache_path)
        logger.info("  Fetch Timeout: %ss", self.fetch_timeout_sec)
        logger.info("  Mosaic JPEG Quality: %s", self.mosaic_jpeg_quality)


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
