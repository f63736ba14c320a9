"""Logging helpers.

Library modules log through plain stdlib loggers obtained from ``get_logger``.
Applications that want structured output call ``setup_logging`` once; it
installs handlers rendered through structlog so that both stdlib records and
structlog events share one format.
"""
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Optional, Union

import structlog

from confbind.config.schemas import LoggingConfig

LIBRARY_LOGGER_NAME = "confbind"

# The library stays silent unless the application configures logging.
logging.getLogger(LIBRARY_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Get a stdlib logger for a library module."""
    return logging.getLogger(name)


def _shared_processors() -> List[Any]:
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def _renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(config: Optional[Union[LoggingConfig, Dict[str, Any]]] = None) -> structlog.stdlib.BoundLogger:
    """
    Set up structured logging using structlog.

    Args:
        config: LoggingConfig or a dictionary accepted by it. Defaults are used
            when omitted.

    Returns:
        Configured structlog logger for the library namespace.
    """
    if config is None:
        logging_config = LoggingConfig()
    elif isinstance(config, LoggingConfig):
        logging_config = config
    else:
        logging_config = LoggingConfig(**config)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, logging_config.level))

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=_renderer(logging_config.format),
        foreign_pre_chain=_shared_processors(),
    )

    handlers: List[logging.Handler] = []

    if logging_config.destination in ("file", "both"):
        log_path = os.path.expandvars(logging_config.file.path)
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=logging_config.file.max_size_mb * 1024 * 1024,
            backupCount=logging_config.file.backup_count,
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if logging_config.destination in ("stdout", "both"):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    # Remove any existing handlers and add new ones
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger(LIBRARY_LOGGER_NAME)
    logger.debug(
        "Logging configured",
        log_level=logging_config.level,
        log_destination=logging_config.destination,
        log_format=logging_config.format,
    )
    return logger
