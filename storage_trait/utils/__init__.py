"""
Shared utilities: exceptions, logging and work queues.
"""
from .dispatch import WorkQueues
from .exceptions import (
    as_storage_error,
    ConfigurationError,
    InvalidReferenceError,
    NoDataError,
    StorageTraitError,
    TransportError,
    UnsupportedOperationError,
)
from .log_config import configure_logging

__all__ = [
    "as_storage_error",
    "WorkQueues",
    "configure_logging",
    "StorageTraitError",
    "ConfigurationError",
    "UnsupportedOperationError",
    "InvalidReferenceError",
    "NoDataError",
    "TransportError",
]
