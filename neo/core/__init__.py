"""
Core runtime for neo.

Container, error taxonomy and result types. Services, plugins and the
bootstrap live in submodules and are imported from there.
"""

from .container import Container, Lifetime, Token, Tokens, UseClass, UseExisting, UseFactory, UseValue
from .exceptions import (
    AppError,
    AuthenticationError,
    CommandError,
    ConfigurationError,
    ErrorCategory,
    ErrorSeverity,
    FileSystemError,
    NetworkError,
    PermissionDeniedError,
    PluginError,
    UnknownError,
    ValidationError,
)
from .result import Failure, Result, Success, failure, is_failure, is_success, success

__all__ = [
    "AppError",
    "AuthenticationError",
    "CommandError",
    "ConfigurationError",
    "Container",
    "ErrorCategory",
    "ErrorSeverity",
    "Failure",
    "FileSystemError",
    "Lifetime",
    "NetworkError",
    "PermissionDeniedError",
    "PluginError",
    "Result",
    "Success",
    "Token",
    "Tokens",
    "UnknownError",
    "UseClass",
    "UseExisting",
    "UseFactory",
    "UseValue",
    "ValidationError",
    "failure",
    "is_failure",
    "is_success",
    "success",
]
