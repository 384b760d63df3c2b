"""Custom exception hierarchy for the Guildhall character manager.

All exceptions inherit from GuildhallError and carry an ``ErrorKind`` so
the presentation layer can turn any failure into an ``OperationResult``
without inspecting exception types one by one.

Example:
    >>> from guildhall.core.exceptions import ResourceNotFoundError
    >>> raise ResourceNotFoundError("Character not found", resource="character", resource_id=7)
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Error categories surfaced to callers."""

    INVALID_INPUT = "invalid_input"
    DUPLICATE_RESOURCE = "duplicate_resource"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE_OPERATION = "database_operation"
    BUSINESS_RULE_VIOLATION = "business_rule_violation"
    CONFIGURATION = "configuration"


class GuildhallError(Exception):
    """Base exception for all Guildhall errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
        kind: Error category used by the presentation layer.
    """

    kind: ErrorKind = ErrorKind.DATABASE_OPERATION

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Input Exceptions
# =============================================================================


class InvalidInputError(GuildhallError):
    """Raised when an entity or argument violates a field-level constraint.

    Always raised before any storage call is attempted.
    """

    kind = ErrorKind.INVALID_INPUT

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid input error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


class DuplicateResourceError(InvalidInputError):
    """Raised when a name uniqueness rule would be violated."""

    kind = ErrorKind.DUPLICATE_RESOURCE

    def __init__(
        self,
        message: str,
        *,
        resource: str | None = None,
        name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if resource:
            combined_details["resource"] = resource
        super().__init__(message, field_name="name" if name else None, invalid_value=name, details=combined_details)


class ResourceNotFoundError(GuildhallError):
    """Raised when a referenced id does not match any stored row."""

    kind = ErrorKind.RESOURCE_NOT_FOUND

    def __init__(
        self,
        message: str,
        *,
        resource: str | None = None,
        resource_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not-found error with resource context.

        Args:
            message: Human-readable error description.
            resource: Resource family ('character', 'guild', ...).
            resource_id: The id that was looked up.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if resource:
            combined_details["resource"] = resource
        if resource_id is not None:
            combined_details["resource_id"] = resource_id
        super().__init__(message, details=combined_details)


# =============================================================================
# Storage Exceptions
# =============================================================================


class DatabaseOperationError(GuildhallError):
    """Raised when the storage layer fails.

    Covers connectivity problems, constraint violations not caught by
    validation, and failed transactions.
    """

    kind = ErrorKind.DATABASE_OPERATION

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if operation:
            combined_details["operation"] = operation
        super().__init__(message, details=combined_details)


# =============================================================================
# Business Rule Exceptions
# =============================================================================


class BusinessRuleViolationError(GuildhallError):
    """Raised when a request is well-formed but not allowed by the rules.

    Examples are deleting a guild that still has members or joining a
    second guild without leaving the first.
    """

    kind = ErrorKind.BUSINESS_RULE_VIOLATION

    def __init__(
        self,
        message: str,
        *,
        rule: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize business rule error with the rule identifier.

        Args:
            message: Human-readable error description.
            rule: Short identifier of the violated rule.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if rule:
            combined_details["rule"] = rule
        super().__init__(message, details=combined_details)


class MaxLevelReachedError(BusinessRuleViolationError):
    """Raised when leveling up an entity already at its level ceiling."""

    def __init__(
        self,
        message: str,
        *,
        max_level: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if max_level is not None:
            combined_details["max_level"] = max_level
        super().__init__(message, rule="max_level", details=combined_details)


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(GuildhallError):
    """Raised when application configuration is invalid."""

    kind = ErrorKind.CONFIGURATION

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


__all__ = [
    "ErrorKind",
    "GuildhallError",
    "InvalidInputError",
    "DuplicateResourceError",
    "ResourceNotFoundError",
    "DatabaseOperationError",
    "BusinessRuleViolationError",
    "MaxLevelReachedError",
    "ConfigurationError",
]
