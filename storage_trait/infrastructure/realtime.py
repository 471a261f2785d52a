"""
Firebase Realtime Database backend adapter for key-tree models.
"""
import threading
from typing import Any, List, Optional

import structlog
from firebase_admin import db

from ..core.mapper import TreeSnapshot, tree_children
from ..core.resolver import Address, AddressKind
from ..utils.exceptions import TransportError, UnsupportedOperationError
from .firebase_app import get_firebase_app

logger = structlog.get_logger()


def apply_event(tree: Any, event_type: str, path: str, data: Any) -> Any:
    """
    Fold one listener event into a local copy of the tree.

    `put` replaces the value at `path`, `patch` merges keys into it; a None
    value deletes.
    """
    segments = [segment for segment in path.split("/") if segment]

    def merge(current: Any, update: Any) -> Any:
        if event_type != "patch":
            return update
        merged = dict(current) if isinstance(current, dict) else {}
        for key, value in (update or {}).items():
            if value is None:
                merged.pop(key, None)
            else:
                merged[key] = value
        return merged

    if not segments:
        return merge(tree, data)

    root = dict(tree) if isinstance(tree, dict) else {}
    node = root
    for segment in segments[:-1]:
        child = node.get(segment)
        child = dict(child) if isinstance(child, dict) else {}
        node[segment] = child
        node = child

    leaf = segments[-1]
    value = merge(node.get(leaf), data)
    if value is None:
        node.pop(leaf, None)
    else:
        node[leaf] = value
    return root


class RealtimeListener:
    """Wraps a listener registration so it can be closed once."""

    def __init__(self, registration: Any):
        self._registration = registration
        self._cancelled = False

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._registration.close()


class RealtimeDatabaseBackend:
    """Realtime Database adapter: one subscribable root with child entries."""

    def __init__(self, app: Optional[Any] = None):
        self._app = app

    @property
    def app(self) -> Any:
        if self._app is None:
            self._app = get_firebase_app()
        return self._app

    def connect(self, address: Address) -> db.Reference:
        if address.kind != AddressKind.TREE:
            raise UnsupportedOperationError(
                message=f"Realtime Database cannot serve {address.kind.value} addresses",
                operation="connect"
            )
        app = self.app
        try:
            return db.reference(address.path, app=app, url=address.base_url)
        except Exception as e:
            logger.error("Failed to build tree reference", path=str(address), error=str(e))
            raise TransportError(
                message="Failed to build tree reference",
                code="INVALID_PATH_ERROR",
                original=e
            ) from e

    def child(self, handle: db.Reference, identifier: str) -> db.Reference:
        try:
            return handle.child(identifier)
        except Exception as e:
            logger.error("Failed to build child reference", identifier=identifier, error=str(e))
            raise TransportError(
                message="Failed to build child reference",
                code="INVALID_PATH_ERROR",
                original=e
            ) from e

    def identifier(self, handle: db.Reference) -> Optional[str]:
        return handle.key

    def fetch_one(self, handle: db.Reference) -> TreeSnapshot:
        try:
            return TreeSnapshot(handle.key, handle.get())
        except Exception as e:
            logger.error("Failed to read tree node", path=handle.path, error=str(e))
            raise TransportError(
                message="Failed to read tree node",
                code="GET_NODE_ERROR",
                original=e
            ) from e

    def fetch_all(self, handle: db.Reference) -> List[TreeSnapshot]:
        try:
            children = tree_children(handle.get())
            logger.info("Tree children fetched", path=handle.path, count=len(children))
            return children
        except Exception as e:
            logger.error("Failed to read tree", path=handle.path, error=str(e))
            raise TransportError(
                message="Failed to read tree",
                code="GET_TREE_ERROR",
                original=e
            ) from e

    def listen(self, handle: db.Reference, callback) -> RealtimeListener:
        state = {"tree": None}
        lock = threading.Lock()

        def on_event(event):
            with lock:
                state["tree"] = apply_event(state["tree"], event.event_type, event.path, event.data)
                children = tree_children(state["tree"])
            callback(children, None)

        try:
            registration = handle.listen(on_event)
        except Exception as e:
            logger.error("Failed to start tree listener", path=handle.path, error=str(e))
            raise TransportError(
                message="Failed to listen for tree changes",
                code="LISTEN_ERROR",
                original=e
            ) from e
        return RealtimeListener(registration)

    def create(self, handle: db.Reference, fields: dict) -> db.Reference:
        try:
            ref = handle.push(fields)
            logger.info("Tree node created", path=handle.path, key=ref.key)
            return ref
        except Exception as e:
            logger.error("Failed to create tree node", path=handle.path, error=str(e))
            raise TransportError(
                message="Failed to create tree node",
                code="CREATE_NODE_ERROR",
                original=e
            ) from e

    def delete(self, handle: db.Reference) -> None:
        try:
            handle.delete()
            logger.info("Tree node deleted", path=handle.path)
        except Exception as e:
            logger.error("Failed to delete tree node", path=handle.path, error=str(e))
            raise TransportError(
                message="Failed to delete tree node",
                code="DELETE_NODE_ERROR",
                original=e
            ) from e
