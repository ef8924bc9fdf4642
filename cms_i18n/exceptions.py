"""
Custom Exception Classes for CMS i18n

This module defines custom exceptions for better error handling and
consistent error responses across the content-group layer and its API.
"""

import enum
from typing import Any

from fastapi import status


class ErrorCode(str, enum.Enum):
    """Machine-readable error codes carried in every error response."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    VALIDATION_INVALID_LOCALE = "VALIDATION_INVALID_LOCALE"
    CONFIG_INVALID_TRANSLATABLE = "CONFIG_INVALID_TRANSLATABLE"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_CONTENT_GROUP_NOT_FOUND = "RESOURCE_CONTENT_GROUP_NOT_FOUND"
    DATABASE_ERROR = "DATABASE_ERROR"
    SYNC_FAILED = "SYNC_FAILED"
    SEQUENCE_ALLOCATION_FAILED = "SEQUENCE_ALLOCATION_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class CMSError(Exception):
    """Base exception class for all CMS i18n exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Configuration Exceptions
# ============================================================================


class TranslatableConfigurationError(CMSError):
    """Raised when a translatable declaration contradicts the model"""

    def __init__(self, message: str, model: str | None = None, field: str | None = None):
        details: dict[str, Any] = {}
        if model:
            details["model"] = model
        if field:
            details["field"] = field
        super().__init__(
            message=message,
            error_code=ErrorCode.CONFIG_INVALID_TRANSLATABLE,
            details=details,
        )


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class ResourceNotFoundError(CMSError):
    """Base class for resource not found errors"""

    def __init__(
        self,
        resource_type: str,
        resource_id: Any | None = None,
        error_code: ErrorCode = ErrorCode.RESOURCE_NOT_FOUND,
    ):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code=error_code,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class ContentGroupNotFoundError(ResourceNotFoundError):
    """Raised when no row of a content group matches the request"""

    def __init__(self, content_id: Any | None = None):
        super().__init__(
            resource_type="Content group",
            resource_id=content_id,
            error_code=ErrorCode.RESOURCE_CONTENT_GROUP_NOT_FOUND,
        )


# ============================================================================
# Validation Exceptions
# ============================================================================


class ValidationError(CMSError):
    """Raised when input validation fails"""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_FAILED,
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=error_code,
            details=error_details,
        )


class InvalidLocaleError(ValidationError):
    """Raised when a locale descriptor cannot be normalized to a code"""

    def __init__(self, value: Any):
        super().__init__(
            message=f"Cannot resolve {value!r} to a locale code",
            field="locale",
            details={"value": repr(value)},
            error_code=ErrorCode.VALIDATION_INVALID_LOCALE,
        )


# ============================================================================
# Database & Service Exceptions
# ============================================================================


class DatabaseError(CMSError):
    """Raised when a database operation fails"""

    def __init__(
        self,
        message: str = "A database error occurred",
        operation: str | None = None,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
    ):
        details = {"operation": operation} if operation else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code=error_code,
            details=details,
        )


class ContentSyncError(DatabaseError):
    """Raised when a write or its sibling propagation fails; nothing is committed"""

    def __init__(self, message: str = "Failed to write content group", operation: str | None = None):
        super().__init__(message=message, operation=operation, error_code=ErrorCode.SYNC_FAILED)


class SequenceAllocationError(DatabaseError):
    """Raised when a content id cannot be allocated"""

    def __init__(self, sequence_name: str):
        super().__init__(
            message=f"Failed to allocate next value of sequence '{sequence_name}'",
            operation="next_value",
            error_code=ErrorCode.SEQUENCE_ALLOCATION_FAILED,
        )
        self.details["sequence"] = sequence_name
