"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        GuildhallError: Base exception for all application errors.
        ErrorKind: Error category carried by every exception.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from guildhall.core.config import (
    GameSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from guildhall.core.exceptions import (
    BusinessRuleViolationError,
    ConfigurationError,
    DatabaseOperationError,
    DuplicateResourceError,
    ErrorKind,
    GuildhallError,
    InvalidInputError,
    MaxLevelReachedError,
    ResourceNotFoundError,
)
from guildhall.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "ErrorKind",
    "GuildhallError",
    "InvalidInputError",
    "DuplicateResourceError",
    "ResourceNotFoundError",
    "DatabaseOperationError",
    "BusinessRuleViolationError",
    "MaxLevelReachedError",
    "ConfigurationError",
    # Configuration
    "Settings",
    "StorageSettings",
    "GameSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
