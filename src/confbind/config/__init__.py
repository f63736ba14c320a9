"""Library settings package."""

from .schemas import (
    CacheConfig,
    ConfbindSettings,
    ConversionConfig,
    FileLoggingConfig,
    LoggingConfig,
    ReloadConfig,
    validate_settings,
)

__all__ = [
    'ConfbindSettings',
    'validate_settings',
    'LoggingConfig',
    'FileLoggingConfig',
    'ConversionConfig',
    'CacheConfig',
    'ReloadConfig',
]
