"""
Cloud Firestore backend adapter with lazy client creation and error wrapping.
"""
import os
from typing import Any, List, Optional

import structlog
from google.cloud import firestore
from google.cloud.firestore import Client as FirestoreClient
from google.cloud.firestore import CollectionReference, DocumentReference

from ..config import Settings, get_settings
from ..core.resolver import Address, AddressKind
from ..utils.exceptions import TransportError, UnsupportedOperationError

logger = structlog.get_logger()


class FirestoreListener:
    """Wraps a Firestore watch so it can be cancelled once."""

    def __init__(self, watch: Any):
        self._watch = watch
        self._cancelled = False

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._watch.unsubscribe()


class FirestoreBackend:
    """
    Firestore adapter for collection and single-document models.
    """

    def __init__(self, client: Optional[FirestoreClient] = None, settings: Optional[Settings] = None):
        """Use the given client, or build one from settings on first use."""
        self._client: Optional[FirestoreClient] = client
        self._settings = settings or get_settings()

    @property
    def client(self) -> FirestoreClient:
        """Get or create Firestore client."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self) -> FirestoreClient:
        """Create and configure Firestore client."""
        try:
            if self._settings.use_firestore_emulator:
                # Configure for emulator
                os.environ["FIRESTORE_EMULATOR_HOST"] = self._settings.firestore_emulator_host
                client = firestore.Client(
                    project=self._settings.firestore_project_id,
                    database=self._settings.firestore_database
                )
                logger.info(
                    "Connected to Firestore emulator",
                    host=self._settings.firestore_emulator_host,
                    project=self._settings.firestore_project_id
                )
            else:
                if self._settings.google_credentials_path:
                    os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = self._settings.google_credentials_path

                client = firestore.Client(
                    project=self._settings.firestore_project_id,
                    database=self._settings.firestore_database
                )
                logger.info(
                    "Connected to Firestore",
                    project=self._settings.firestore_project_id
                )

            return client

        except Exception as e:
            logger.error("Failed to create Firestore client", error=str(e))
            raise TransportError(
                message="Failed to connect to database",
                code="FIRESTORE_CONNECTION_ERROR",
                original=e
            ) from e

    def connect(self, address: Address) -> Any:
        if address.kind not in (AddressKind.COLLECTION, AddressKind.DOCUMENT):
            raise UnsupportedOperationError(
                message=f"Firestore cannot serve {address.kind.value} addresses",
                operation="connect"
            )
        client = self.client
        try:
            if address.kind == AddressKind.COLLECTION:
                return client.collection(address.path)
            return client.document(address.path)
        except Exception as e:
            logger.error("Failed to build reference", path=address.path, error=str(e))
            raise TransportError(
                message="Failed to build reference",
                code="INVALID_PATH_ERROR",
                original=e
            ) from e

    def child(self, handle: CollectionReference, identifier: str) -> DocumentReference:
        try:
            return handle.document(identifier)
        except Exception as e:
            logger.error("Failed to build document reference", identifier=identifier, error=str(e))
            raise TransportError(
                message="Failed to build document reference",
                code="INVALID_PATH_ERROR",
                original=e
            ) from e

    def identifier(self, handle: DocumentReference) -> Optional[str]:
        return handle.id

    def fetch_one(self, handle: DocumentReference) -> Any:
        try:
            return handle.get()
        except Exception as e:
            logger.error("Failed to get document", path=handle.path, error=str(e))
            raise TransportError(
                message="Failed to retrieve document",
                code="GET_DOCUMENT_ERROR",
                original=e
            ) from e

    def fetch_all(self, handle: Any) -> List[Any]:
        try:
            docs = list(handle.stream())
            logger.info("Documents fetched", count=len(docs))
            return docs
        except Exception as e:
            logger.error("Failed to query documents", error=str(e))
            raise TransportError(
                message="Failed to query documents",
                code="QUERY_DOCUMENTS_ERROR",
                original=e
            ) from e

    def listen(self, handle: Any, callback) -> FirestoreListener:
        def on_snapshot(docs, changes, read_time):
            callback(docs, None)

        try:
            watch = handle.on_snapshot(on_snapshot)
        except Exception as e:
            logger.error("Failed to start snapshot listener", error=str(e))
            raise TransportError(
                message="Failed to listen for documents",
                code="LISTEN_ERROR",
                original=e
            ) from e
        return FirestoreListener(watch)

    def create(self, handle: CollectionReference, fields: dict) -> DocumentReference:
        try:
            _, doc_ref = handle.add(fields)
            logger.info("Document created", collection=handle.id, document_id=doc_ref.id)
            return doc_ref
        except Exception as e:
            logger.error("Failed to create document", collection=handle.id, error=str(e))
            raise TransportError(
                message="Failed to create document",
                code="CREATE_DOCUMENT_ERROR",
                original=e
            ) from e

    def delete(self, handle: DocumentReference) -> None:
        try:
            handle.delete()
            logger.info("Document deleted", path=handle.path)
        except Exception as e:
            logger.error("Failed to delete document", path=handle.path, error=str(e))
            raise TransportError(
                message="Failed to delete document",
                code="DELETE_DOCUMENT_ERROR",
                original=e
            ) from e
