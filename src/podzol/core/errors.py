# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Custom exceptions for podzol.

All exceptions inherit from PodzolError for consistent error handling.
Nothing in the build pipeline recovers locally: every error aborts the build.
"""

from typing import Iterable, Optional


class PodzolError(Exception):
    """Base exception for all podzol errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize podzol error.

        Args:
            message: Human-readable error message
            details: Additional error details
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for structured logging."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


class ValidationError(PodzolError):
    """A manifest token or field failed validation."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        accepted: Optional[Iterable[str]] = None,
        details: Optional[dict] = None
    ):
        """
        Initialize validation error.

        Args:
            message: Validation error message
            field: Field that failed validation
            accepted: The closed set of values the field accepts
            details: Additional error details
        """
        super().__init__(message, details=details)
        self.field = field
        self.accepted = list(accepted) if accepted is not None else []


class ManifestError(PodzolError):
    """Manifest file missing or unreadable."""

    def __init__(self, message: str, path: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, details=details)
        self.path = path


class ConfigurationError(PodzolError):
    """Configuration error."""

    def __init__(self, message: str, config_file: Optional[str] = None, details: Optional[dict] = None):
        """
        Initialize configuration error.

        Args:
            message: Configuration error message
            config_file: Configuration file path
            details: Additional error details
        """
        super().__init__(message, details=details)
        self.config_file = config_file


class RegistryError(PodzolError):
    """Registry unreachable, non-success response, or malformed body."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[dict] = None
    ):
        """
        Initialize registry error.

        Args:
            message: Error message
            url: Request URL that failed
            status_code: HTTP status code, if a response was received
            details: Additional error details
        """
        super().__init__(message, details=details)
        self.url = url
        self.status_code = status_code


class NotFoundError(RegistryError):
    """Registry answered 404 for a project or version."""

    def __init__(self, resource: str, identifier: str, url: Optional[str] = None):
        message = f"{resource} not found: {identifier}"
        super().__init__(message, url=url, status_code=404)
        self.resource = resource
        self.identifier = identifier


class OverrideError(PodzolError):
    """Override pattern invalid or override source unreadable."""

    def __init__(self, message: str, pattern: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, details=details)
        self.pattern = pattern


class ArchiveError(PodzolError):
    """Archive sink could not be written."""


class SelectionError(PodzolError):
    """No candidate was available to choose from."""


def sanitize_error_for_user(error: Exception, include_type: bool = True) -> str:
    """
    Sanitize error messages for user display.

    Args:
        error: The exception to sanitize
        include_type: Whether to include exception type

    Returns:
        User-friendly one-line error message
    """
    error_msg = str(error).strip().splitlines()[0] if str(error).strip() else ""

    # Limit message length
    if len(error_msg) > 500:
        error_msg = error_msg[:500] + "..."

    if include_type:
        return f"{error.__class__.__name__}: {error_msg}"

    return error_msg
