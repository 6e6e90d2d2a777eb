"""
Error taxonomy for neo.

Every failure that crosses a component boundary is expressed as an AppError
subclass. Each class pins a stable error code, a severity and a category;
the category is what recovery strategies key on.
"""

from __future__ import annotations

import json
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Literal


class ErrorSeverity(str, Enum):
    """How bad a failure is for the user."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """Broad failure classes used to pick a recovery strategy."""

    VALIDATION = "VALIDATION"
    CONFIGURATION = "CONFIGURATION"
    FILESYSTEM = "FILESYSTEM"
    NETWORK = "NETWORK"
    COMMAND = "COMMAND"
    PLUGIN = "PLUGIN"
    AUTHENTICATION = "AUTHENTICATION"
    PERMISSION = "PERMISSION"
    UNKNOWN = "UNKNOWN"


FileOperation = Literal["read", "write", "delete", "create", "access"]


class AppError(Exception):
    """
    Base exception for all neo errors.

    Attributes:
        message: Human-readable error description
        code: Stable machine-readable error code
        severity: ErrorSeverity of the failure
        category: ErrorCategory of the failure
        timestamp: When the error was constructed (UTC)
        context: Additional debugging context (paths, URLs, etc.)
        suggestions: Remediation hints shown to the user
        original_error: The wrapped lower-level exception, if any
    """

    code: ClassVar[str] = "APP_ERROR"
    severity: ClassVar[ErrorSeverity] = ErrorSeverity.MEDIUM
    category: ClassVar[ErrorCategory] = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        self.message = message
        self.timestamp = datetime.now(timezone.utc)
        self.context = context
        self.suggestions = suggestions
        self.original_error = original_error
        if original_error is not None:
            self.__cause__ = original_error
        super().__init__(message)

    @property
    def name(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        return self.message

    def get_user_message(self) -> str:
        """Message for the terminal, with suggestions appended."""
        message = self.message
        if self.suggestions:
            message += "\n\nSuggestions:"
            for suggestion in self.suggestions:
                message += f"\n  • {suggestion}"
        return message

    def get_stack(self) -> str | None:
        """Formatted traceback, or None if the error was never raised."""
        if self.__traceback__ is None:
            return None
        return "".join(traceback.format_exception(type(self), self, self.__traceback__))

    def get_detailed_report(self) -> str:
        """Multi-line report for debugging and logs."""
        report = [
            f"Error: {self.name}",
            f"Code: {self.code}",
            f"Message: {self.message}",
            f"Severity: {self.severity.value}",
            f"Category: {self.category.value}",
            f"Timestamp: {self.timestamp.isoformat()}",
        ]

        if self.context:
            report.append(f"Context: {json.dumps(self.context, indent=2, default=str)}")

        if self.suggestions:
            report.append(f"Suggestions: {', '.join(self.suggestions)}")

        stack = self.get_stack()
        if stack:
            report.append(f"Stack Trace:\n{stack}")

        return "\n".join(report)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable representation."""
        return {
            "name": self.name,
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context,
            "suggestions": self.suggestions,
            "stack": self.get_stack(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


# =============================================================================
# Command Errors
# =============================================================================


class CommandError(AppError):
    """A command failed while executing."""

    code = "COMMAND_ERROR"
    severity = ErrorSeverity.MEDIUM
    category = ErrorCategory.COMMAND

    def __init__(
        self,
        message: str,
        command_name: str,
        *,
        context: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        self.command_name = command_name
        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            original_error=original_error,
        )


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(AppError, ValueError):
    """
    Bad user input.

    Inherits from ValueError so callers catching ValueError still work.
    """

    code = "VALIDATION_ERROR"
    severity = ErrorSeverity.LOW
    category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        *,
        context: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message, context=context, suggestions=suggestions)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(AppError):
    """Persisted configuration is missing, malformed or invalid."""

    code = "CONFIGURATION_ERROR"
    severity = ErrorSeverity.HIGH
    category = ErrorCategory.CONFIGURATION

    DEFAULT_SUGGESTIONS: ClassVar[list[str]] = [
        "Check your configuration file for syntax errors",
        "Ensure all required configuration values are set",
        "Run 'neo config validate' to check your configuration",
    ]

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        *,
        context: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        self.config_key = config_key
        super().__init__(
            message,
            context=context,
            suggestions=suggestions or list(self.DEFAULT_SUGGESTIONS),
            original_error=original_error,
        )


# =============================================================================
# Filesystem Errors
# =============================================================================


class FileSystemError(AppError):
    """A file operation failed."""

    code = "FILESYSTEM_ERROR"
    severity = ErrorSeverity.MEDIUM
    category = ErrorCategory.FILESYSTEM

    def __init__(
        self,
        message: str,
        path: str,
        operation: FileOperation,
        *,
        context: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        self.path = path
        self.operation = operation
        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            original_error=original_error,
        )


# =============================================================================
# Network Errors
# =============================================================================


class NetworkError(AppError):
    """An HTTP or other network call failed."""

    code = "NETWORK_ERROR"
    severity = ErrorSeverity.MEDIUM
    category = ErrorCategory.NETWORK

    DEFAULT_SUGGESTIONS: ClassVar[list[str]] = [
        "Check your internet connection",
        "Verify the API endpoint is correct",
        "Check if you need to configure a proxy",
    ]

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        *,
        context: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(
            message,
            context=context,
            suggestions=suggestions or list(self.DEFAULT_SUGGESTIONS),
            original_error=original_error,
        )


# =============================================================================
# Plugin Errors
# =============================================================================


class PluginError(AppError):
    """A plugin could not be discovered, loaded or run."""

    code = "PLUGIN_ERROR"
    severity = ErrorSeverity.MEDIUM
    category = ErrorCategory.PLUGIN

    def __init__(
        self,
        message: str,
        plugin_name: str,
        *,
        context: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        self.plugin_name = plugin_name
        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            original_error=original_error,
        )


# =============================================================================
# Auth Errors
# =============================================================================


class AuthenticationError(AppError):
    """Credentials are missing, invalid or expired."""

    code = "AUTHENTICATION_ERROR"
    severity = ErrorSeverity.HIGH
    category = ErrorCategory.AUTHENTICATION

    DEFAULT_SUGGESTIONS: ClassVar[list[str]] = [
        "Check your credentials",
        "Run 'neo auth login' to authenticate",
        "Verify your API token is still valid",
    ]

    def __init__(
        self,
        message: str = "Authentication failed",
        *,
        context: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            suggestions=suggestions or list(self.DEFAULT_SUGGESTIONS),
        )


class PermissionDeniedError(AppError):
    """
    The current user lacks a permission on a resource.

    Not named PermissionError so the builtin stays reachable.
    """

    code = "PERMISSION_ERROR"
    severity = ErrorSeverity.HIGH
    category = ErrorCategory.PERMISSION

    def __init__(
        self,
        message: str,
        resource: str,
        required_permission: str | None = None,
        *,
        context: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        self.resource = resource
        self.required_permission = required_permission
        super().__init__(message, context=context, suggestions=suggestions)


# =============================================================================
# Unclassified
# =============================================================================


class UnknownError(AppError):
    """Wraps a failure that did not originate from the taxonomy."""

    code = "UNKNOWN_ERROR"
    category = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        *,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        context: dict[str, Any] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message, context=context, original_error=original_error)
        self.severity = severity  # type: ignore[misc]
