"""
Firebase Storage adapter for per-record assets.
"""
from typing import Any, Optional

import structlog
from firebase_admin import storage

from ..core.resolver import Address, AddressKind
from ..utils.exceptions import TransportError, UnsupportedOperationError
from .firebase_app import get_firebase_app

logger = structlog.get_logger()


class AssetStorage:
    """Builds blob handles in the asset bucket. No bytes are transferred here."""

    def __init__(self, app: Optional[Any] = None):
        self._app = app

    @property
    def app(self) -> Any:
        if self._app is None:
            self._app = get_firebase_app()
        return self._app

    def asset(self, address: Optional[Address]) -> Optional[Any]:
        """Blob handle for an asset address, or None when there is none."""
        if address is None:
            return None
        if address.kind != AddressKind.ASSET:
            raise UnsupportedOperationError(
                message=f"Storage cannot serve {address.kind.value} addresses",
                operation="asset"
            )
        try:
            bucket = storage.bucket(address.base_url, app=self.app)
            return bucket.blob(address.path)
        except Exception as e:
            logger.error("Failed to resolve asset", path=address.path, error=str(e))
            raise TransportError(
                message="Failed to resolve asset",
                code="ASSET_REFERENCE_ERROR",
                original=e
            ) from e
