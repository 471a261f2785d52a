"""
Firebase Admin app shared by the Realtime Database and Storage adapters.
"""
from typing import Optional

import firebase_admin
import structlog
from firebase_admin import credentials

from ..config import Settings, get_settings
from ..utils.exceptions import TransportError

logger = structlog.get_logger()

_app: Optional[firebase_admin.App] = None


def get_firebase_app(settings: Optional[Settings] = None) -> firebase_admin.App:
    """Get or initialize the Firebase app for this package."""
    global _app
    if _app is not None:
        return _app

    settings = settings or get_settings()
    try:
        if settings.google_credentials_path:
            credential = credentials.Certificate(settings.google_credentials_path)
        else:
            credential = credentials.ApplicationDefault()

        options = {
            "databaseURL": settings.firebase_database_url,
            "storageBucket": settings.firebase_storage_bucket,
            "projectId": settings.firestore_project_id,
        }
        options = {key: value for key, value in options.items() if value}

        _app = firebase_admin.initialize_app(credential, options, name=settings.app_name)
        logger.info(
            "Firebase app initialized",
            name=settings.app_name,
            database_url=settings.firebase_database_url,
            storage_bucket=settings.firebase_storage_bucket
        )
        return _app

    except Exception as e:
        logger.error("Failed to initialize Firebase app", error=str(e))
        raise TransportError(
            message="Failed to initialize Firebase",
            code="FIREBASE_INIT_ERROR",
            original=e
        ) from e


def cleanup_firebase() -> None:
    """Delete the shared Firebase app."""
    global _app
    if _app is not None:
        firebase_admin.delete_app(_app)
        _app = None
        logger.info("Firebase app deleted")
