"""
Custom exceptions for the package.
Every failure delivered through a failure completion or a stream error is
one of these.
"""

from typing import List, Optional


class StorageTraitError(Exception):
    """Base exception for all package exceptions."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[List[str]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or []
        super().__init__(self.message)


class ConfigurationError(StorageTraitError):
    """Raised when a model descriptor is inconsistent."""

    def __init__(
        self,
        message: str = "Invalid model configuration",
        details: Optional[List[str]] = None
    ):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details=details
        )


class UnsupportedOperationError(StorageTraitError):
    """Raised when a descriptor cannot resolve the address an operation needs."""

    def __init__(
        self,
        message: str = "Operation not supported for this model",
        model_name: Optional[str] = None,
        operation: Optional[str] = None
    ):
        details = []
        if model_name:
            details.append(f"Model: {model_name}")
        if operation:
            details.append(f"Operation: {operation}")

        super().__init__(
            message=message,
            code="UNSUPPORTED_OPERATION",
            details=details
        )


class InvalidReferenceError(StorageTraitError):
    """Raised when a query or mutation targets an unusable reference."""

    def __init__(
        self,
        message: str = "Invalid collection reference",
        code: str = "INVALID_COLLECTION_REFERENCE",
        details: Optional[List[str]] = None
    ):
        super().__init__(
            message=message,
            code=code,
            details=details
        )


class NoDataError(StorageTraitError):
    """Raised when a read that should have found something found nothing."""

    def __init__(
        self,
        message: str = "Data Error",
        path: Optional[str] = None
    ):
        super().__init__(
            message=message,
            code="NO_DATA",
            details=[f"Path: {path}"] if path else []
        )


class TransportError(StorageTraitError):
    """Raised when the backend SDK reports a failure."""

    def __init__(
        self,
        message: str = "Backend operation failed",
        code: str = "TRANSPORT_ERROR",
        original: Optional[BaseException] = None,
        details: Optional[List[str]] = None
    ):
        self.original = original
        if details is None and original is not None:
            details = [str(original)]

        super().__init__(
            message=message,
            code=code,
            details=details
        )


def as_storage_error(error: BaseException) -> StorageTraitError:
    """Pass package errors through; wrap anything else a backend raised."""
    if isinstance(error, StorageTraitError):
        return error
    return TransportError(
        message="Backend call failed",
        code="BACKEND_ERROR",
        original=error
    )
