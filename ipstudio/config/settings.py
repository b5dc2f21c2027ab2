"""Configuration management using Pydantic Settings.

This module provides type-safe configuration with automatic environment
variable loading and validation.

The configuration is organized into logical groups:
- DatabaseConfig: Submission store connection settings
- LoggingConfig: Logging levels, files, and debugging options
- PricingConfig: Platform fees and default download prices
- UploadLimitsConfig: Per-content-type file ceilings and upload retries
- StorageConfig: Where uploaded media lands and how it is addressed
- LocationConfig: Autocomplete and geocoding tuning
- PresetConfig: Saved split preset limits
- BpmConfig: BPM detection acceptance
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MEGABYTE = 1024 * 1024


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = "sqlite+aiosqlite:///data/db/ipstudio.db"
    echo: bool = False
    pool_timeout: int = 30


class LoggingConfig(BaseModel):
    """Logging configuration for console and file output."""

    console_level: str = "INFO"
    file_level: str = "DEBUG"
    log_file: Path = Path("ipstudio.log")
    real_time_debug: bool = True


class PricingConfig(BaseModel):
    """Platform pricing constants (all amounts in USDC)."""

    currency: str = "USDC"

    # In-mixer recording fee charged per recorded remix
    remix_fee: float = 0.10

    # Offline download defaults (creator can adjust)
    loop_download_price: float = 2.00
    song_download_price: float = 1.00
    video_download_price: float = 2.00

    # Fixed fee for commercial/collaboration contact requests
    inquiry_fee: float = 1.00


class UploadLimitsConfig(BaseModel):
    """File ceilings enforced before anything reaches object storage."""

    audio_max_mb: int = 50
    loop_pack_item_max_mb: int = 10
    ep_item_max_mb: int = 50
    video_max_mb: int = 10

    # 5 second nominal limit plus a buffer for encoding variations
    video_nominal_seconds: float = 5.0
    video_max_seconds: float = 5.5

    bundle_min_files: int = 2
    bundle_max_files: int = 5

    upload_retry_count: int = 3
    upload_retry_base_delay: float = 0.5
    upload_retry_max_delay: float = 10.0


class StorageConfig(BaseModel):
    """Object storage settings for the local reference adapter."""

    media_dir: Path = Path("data/media")
    public_base_url: str = "http://localhost:8000/media"


class LocationConfig(BaseModel):
    """Location autocomplete and geocoding configuration."""

    autocomplete_limit: int = 5
    min_query_length: int = 2
    fuzzy_threshold: float = 85.0


class PresetConfig(BaseModel):
    """Saved split preset configuration."""

    max_presets: int = 3
    store_dir: Path = Path("data/presets")


class BpmConfig(BaseModel):
    """BPM detection acceptance configuration."""

    min_confidence: float = 0.5


class Settings(BaseSettings):
    """Main application settings with environment variable support.

    Environment variables can be set using flat naming or nested naming:
    - Flat: DATABASE_URL, CONSOLE_LOG_LEVEL, REMIX_FEE
    - Nested: DATABASE__URL, LOGGING__CONSOLE_LEVEL, PRICING__REMIX_FEE

    The .env file is automatically loaded for development convenience.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Nested configuration groups
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    pricing: PricingConfig = PricingConfig()
    uploads: UploadLimitsConfig = UploadLimitsConfig()
    storage: StorageConfig = StorageConfig()
    locations: LocationConfig = LocationConfig()
    presets: PresetConfig = PresetConfig()
    bpm: BpmConfig = BpmConfig()

    # Top-level settings
    data_dir: Path = Path("data")

    @model_validator(mode="before")
    @classmethod
    def transform_flat_env_vars(cls, data: Any) -> Any:
        """Transform flat environment variables to nested structure.

        Handles flat env vars (DATABASE_URL) and maps them to the nested
        structure expected by the models (database.url).
        """
        if not isinstance(data, dict):
            return data

        transformed = {}

        flat_mappings = {
            "database": {
                "database_url": "url",
                "database_echo": "echo",
            },
            "logging": {
                "console_log_level": "console_level",
                "file_log_level": "file_level",
                "log_file": "log_file",
                "log_real_time_debug": "real_time_debug",
            },
            "pricing": {
                "remix_fee": "remix_fee",
                "pricing_currency": "currency",
            },
            "storage": {
                "media_dir": "media_dir",
                "media_public_base_url": "public_base_url",
            },
        }
        for section, mapping in flat_mappings.items():
            for env_key, field_key in mapping.items():
                if env_key in data:
                    transformed.setdefault(section, {})[field_key] = data.pop(env_key)

        data.update(transformed)

        return data


# Singleton instance for application use
settings = Settings()

# Create data directory if it doesn't exist
settings.data_dir.mkdir(exist_ok=True)


# =============================================================================
# FLAT KEY ACCESS
# =============================================================================

_LEGACY_KEY_MAP = {
    "DATABASE_URL": lambda: settings.database.url,
    "DATABASE_ECHO": lambda: settings.database.echo,
    "CONSOLE_LOG_LEVEL": lambda: settings.logging.console_level,
    "FILE_LOG_LEVEL": lambda: settings.logging.file_level,
    "LOG_FILE": lambda: settings.logging.log_file,
    "DATA_DIR": lambda: settings.data_dir,
    "REMIX_FEE": lambda: settings.pricing.remix_fee,
    "PRICING_CURRENCY": lambda: settings.pricing.currency,
    "INQUIRY_FEE": lambda: settings.pricing.inquiry_fee,
    "BUNDLE_MIN_FILES": lambda: settings.uploads.bundle_min_files,
    "BUNDLE_MAX_FILES": lambda: settings.uploads.bundle_max_files,
    "VIDEO_MAX_SECONDS": lambda: settings.uploads.video_max_seconds,
    "UPLOAD_RETRY_COUNT": lambda: settings.uploads.upload_retry_count,
    "MEDIA_DIR": lambda: settings.storage.media_dir,
    "MAX_SPLIT_PRESETS": lambda: settings.presets.max_presets,
    "BPM_MIN_CONFIDENCE": lambda: settings.bpm.min_confidence,
}


def get_config(key: str, default=None):
    """Get configuration value by flat key with optional default.

    Args:
        key: Configuration key to retrieve
        default: Default value if key not found

    Returns:
        Configuration value or default

    Example:
        >>> fee = get_config("REMIX_FEE", 0.10)
    """
    if key in _LEGACY_KEY_MAP:
        return _LEGACY_KEY_MAP[key]()

    return default
