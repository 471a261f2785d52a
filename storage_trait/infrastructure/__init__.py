"""
Infrastructure layer for external service clients.
"""
from .base import DatabaseBackend, Listener
from .firebase_app import cleanup_firebase, get_firebase_app
from .firestore import FirestoreBackend
from .realtime import RealtimeDatabaseBackend
from .storage import AssetStorage

__all__ = [
    "DatabaseBackend",
    "Listener",
    "FirestoreBackend",
    "RealtimeDatabaseBackend",
    "AssetStorage",
    "get_firebase_app",
    "cleanup_firebase",
]
