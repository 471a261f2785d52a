"""
Glue between application models and Firebase document, key-tree and blob storage.
"""
from .config import Settings, get_settings
from .core import QueryDescriptor, WhereClause
from .infrastructure import AssetStorage, FirestoreBackend, RealtimeDatabaseBackend
from .models import AssetConfig, AssetReference, BackendKind, ModelDescriptor, Record
from .repository import Repository
from .utils import (
    ConfigurationError,
    InvalidReferenceError,
    NoDataError,
    StorageTraitError,
    TransportError,
    UnsupportedOperationError,
    WorkQueues,
    configure_logging,
)

__all__ = [
    "Settings",
    "get_settings",
    "Record",
    "ModelDescriptor",
    "BackendKind",
    "AssetConfig",
    "AssetReference",
    "Repository",
    "WhereClause",
    "QueryDescriptor",
    "WorkQueues",
    "FirestoreBackend",
    "RealtimeDatabaseBackend",
    "AssetStorage",
    "configure_logging",
    "StorageTraitError",
    "ConfigurationError",
    "UnsupportedOperationError",
    "InvalidReferenceError",
    "NoDataError",
    "TransportError",
]
