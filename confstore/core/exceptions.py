# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
ConfStore Exception Hierarchy

Exception Hierarchy:
    ConfStoreError (base)
    ├── LocationNotFoundError   - backing file/key path absent
    ├── SectionNotFoundError    - section absent in an existing location
    ├── InvalidArgumentError    - malformed path or required parameter
    ├── AccessDeniedError       - permission probe failed
    ├── StoreIOError            - write/enumerate failed for another reason
    └── UnsupportedPlatformError

Each concrete error also derives from the matching builtin so callers can
catch ``FileNotFoundError``, ``KeyError``, ``PermissionError`` etc.
"""

import logging
import traceback
from typing import Any, Dict, Optional

# ============================================================================
# Base Exception
# ============================================================================


class ConfStoreError(Exception):
    """Base exception for all confstore errors"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        result = {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }

        if self.cause:
            result["cause"] = {
                "type": self.cause.__class__.__name__,
                "message": str(self.cause),
            }

        return result

    def __str__(self):
        base = self.message
        if self.details:
            base += f" | Details: {self.details}"
        if self.cause:
            base += f" | Caused by: {self.cause}"
        return base


# ============================================================================
# Location / Section Errors
# ============================================================================


class LocationNotFoundError(ConfStoreError, FileNotFoundError):
    """Backing store location does not exist"""

    def __init__(self, message: str, location: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.location = location

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["location"] = self.location
        return result


class SectionNotFoundError(ConfStoreError, KeyError):
    """Addressed section does not exist in an existing location"""

    def __init__(self, message: str, section: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.section = section

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["section"] = self.section
        return result


# ============================================================================
# Argument / Permission Errors
# ============================================================================


class InvalidArgumentError(ConfStoreError, ValueError):
    """Malformed path or missing required parameter"""


class AccessDeniedError(ConfStoreError, PermissionError):
    """Permission probe failed"""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["path"] = self.path
        return result


# ============================================================================
# I/O Errors
# ============================================================================


class StoreIOError(ConfStoreError, OSError):
    """Underlying storage operation failed"""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        location: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.location = location

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update(
            {
                "operation": self.operation,
                "location": self.location,
            }
        )
        return result


class UnsupportedPlatformError(ConfStoreError):
    """Backend is not available on this platform"""


# ============================================================================
# Error Handler
# ============================================================================


class ErrorHandler:
    """Centralized error handling and logging"""

    @staticmethod
    def handle_exception(
        error: Exception, context: Optional[Dict[str, Any]] = None, reraise: bool = True
    ) -> Dict[str, Any]:
        """
        Handle an exception with proper logging and formatting

        Args:
            error: The exception to handle
            context: Additional context information
            reraise: Whether to reraise the exception

        Returns:
            Error dictionary

        Raises:
            The original exception if reraise=True
        """
        logger = logging.getLogger("confstore.error_handler")

        if isinstance(error, ConfStoreError):
            store_error = error
        else:
            store_error = ConfStoreError(
                message=str(error), cause=error, details=context or {}
            )

        error_dict = store_error.to_dict()
        if context:
            error_dict["context"] = context

        logger.error(
            f"{error_dict['type']}: {error_dict['message']}",
            extra={"error_details": error_dict},
        )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Stack trace:\n{traceback.format_exc()}")

        if reraise:
            raise store_error

        return error_dict
