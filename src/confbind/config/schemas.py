"""Settings schema for the library itself."""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class FileLoggingConfig(BaseModel):
    """Rotating log file settings."""

    path: str = Field("logs/confbind.log", description="Log file path")
    max_size_mb: int = Field(10, description="Maximum size of one log file in MB")
    backup_count: int = Field(5, description="Number of rotated files kept")

    @field_validator("max_size_mb", "backup_count")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate size and count are not negative."""
        if v < 0:
            raise ValueError("Value must not be negative")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    destination: str = Field("stdout", description="stdout, file or both")
    format: str = Field("console", description="console or json rendering")
    file: FileLoggingConfig = Field(default_factory=lambda: FileLoggingConfig())

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """
        Validate log level.

        Args:
            v: Value to validate

        Returns:
            Upper-cased level

        Raises:
            ValueError: If the level is unknown
        """
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of {VALID_LOG_LEVELS}")
        return level

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        """Validate log destination."""
        valid_destinations = ["stdout", "file", "both"]
        if v not in valid_destinations:
            raise ValueError(f"Log destination must be one of {valid_destinations}")
        return v

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["console", "json"]
        if v not in valid_formats:
            raise ValueError(f"Log format must be one of {valid_formats}")
        return v


class ConversionConfig(BaseModel):
    """How collection leaves are split."""

    list_delimiter: str = Field(",", description="Delimiter between collection elements")
    strip_elements: bool = Field(True, description="Strip whitespace around elements")

    @field_validator("list_delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        """Validate delimiter is not empty."""
        if not v:
            raise ValueError("List delimiter must not be empty")
        return v


class CacheConfig(BaseModel):
    """Caching provider configuration."""

    enabled: bool = Field(True, description="Wrap the provider in a cache")
    cache_defaults: bool = Field(
        True, description="Cache defaults returned for missing paths until the next reload"
    )


class ReloadConfig(BaseModel):
    """Timed reload configuration."""

    interval_seconds: float = Field(0.0, description="Reload period; 0 disables timed reloads")

    @field_validator("interval_seconds")
    @classmethod
    def validate_interval(cls, v: float) -> float:
        """Validate interval is not negative."""
        if v < 0:
            raise ValueError("Reload interval must not be negative")
        return v

    @property
    def enabled(self) -> bool:
        return self.interval_seconds > 0


class ConfbindSettings(BaseModel):
    """Top level library settings."""

    logging: LoggingConfig = Field(default_factory=lambda: LoggingConfig())
    conversion: ConversionConfig = Field(default_factory=lambda: ConversionConfig())
    cache: CacheConfig = Field(default_factory=lambda: CacheConfig())
    reload: ReloadConfig = Field(default_factory=lambda: ReloadConfig())

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None) -> "ConfbindSettings":
        """Create settings from a plain dictionary."""
        return cls(**(data or {}))


def validate_settings(settings: Dict[str, Any]) -> ConfbindSettings:
    """
    Validate settings.

    Args:
        settings: Settings to validate

    Returns:
        Validated settings

    Raises:
        pydantic.ValidationError: If settings are invalid
    """
    return ConfbindSettings.from_dict(settings)
