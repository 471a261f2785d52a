"""
Shared test models, the in-memory backend and async callback helpers.
"""

import asyncio
import itertools
import threading
from typing import ClassVar, Dict, List, Optional

from pydantic import Field

from storage_trait.core.mapper import TreeSnapshot
from storage_trait.core.resolver import Address, AddressKind
from storage_trait.models import AssetConfig, BackendKind, ModelDescriptor, Record
from storage_trait.utils.dispatch import WorkQueues
from storage_trait.utils.exceptions import UnsupportedOperationError

BACKGROUND_PREFIX = "test-background"


# Models used across the suite

class Ticket(Record):
    descriptor: ClassVar[ModelDescriptor] = ModelDescriptor(
        collection="tickets",
        assets=AssetConfig(namespace="tickets", placeholder="images/ticket-placeholder.png")
    )

    title: str = ""
    status: str = "open"
    priority: int = 0
    tags: List[str] = Field(default_factory=list)


class AppSettings(Record):
    descriptor: ClassVar[ModelDescriptor] = ModelDescriptor(
        kind=BackendKind.DOCUMENT,
        document_path="settings/app"
    )

    theme: str = "light"
    beta: bool = False


class Quote(Record):
    descriptor: ClassVar[ModelDescriptor] = ModelDescriptor(
        kind=BackendKind.KEY_TREE,
        base_url="https://test-project.firebaseio.com",
        reference="quotes"
    )

    text: str = ""
    author: Optional[str] = None


class Orphan(Record):
    descriptor: ClassVar[ModelDescriptor] = ModelDescriptor()

    name: str = ""


# In-memory backend

OPERATORS = {
    "==": lambda a, b: a == b,
    "<": lambda a, b: a is not None and a < b,
    "<=": lambda a, b: a is not None and a <= b,
    ">": lambda a, b: a is not None and a > b,
    ">=": lambda a, b: a is not None and a >= b,
}


class FakeSnapshot:
    """Document snapshot with the attributes Record.from_snapshot reads."""

    def __init__(self, doc_id: str, data: Optional[dict]):
        self.id = doc_id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[dict]:
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, path: str):
        self.path = path
        self.id = path.rsplit("/", 1)[-1]

    @property
    def parent(self) -> str:
        return path_parent(self.path)


class FakeCollection:
    def __init__(self, path: str, filters: tuple = ()):
        self.path = path
        self.id = path.rsplit("/", 1)[-1]
        self.filters = filters

    def where(self, filter):
        return FakeCollection(self.path, self.filters + (filter,))

    def matches(self, data: dict) -> bool:
        return all(
            OPERATORS[f.op_string](data.get(f.field_path), f.value)
            for f in self.filters
        )


class FakeListener:
    def __init__(self, handle, callback):
        self.handle = handle
        self.callback = callback
        self.cancel_count = 0

    @property
    def cancelled(self) -> bool:
        return self.cancel_count > 0

    def cancel(self) -> None:
        self.cancel_count += 1


def path_parent(path: str) -> str:
    return path.rsplit("/", 1)[0]


class InMemoryBackend:
    """Backend adapter storing records in dicts, for engine tests."""

    def __init__(self):
        self.data: Dict[str, Dict[str, dict]] = {}
        self.listeners: List[FakeListener] = []
        self.fail_with: Optional[Exception] = None
        self.threads: List[str] = []
        self._ids = itertools.count(1)

    # Test helpers

    def put(self, path: str, doc_id: str, data: dict) -> None:
        self.data.setdefault(path, {})[doc_id] = dict(data)

    def notify(self, path: str) -> None:
        """Push the current contents of a path to its live listeners."""
        for listener in list(self.listeners):
            if listener.handle.path == path and not listener.cancelled:
                listener.callback(self._snapshots(listener.handle), None)

    def emit_raw(self, path: str, snapshots, error) -> None:
        for listener in list(self.listeners):
            if listener.handle.path == path and not listener.cancelled:
                listener.callback(snapshots, error)

    def _record_call(self):
        self.threads.append(threading.current_thread().name)
        if self.fail_with is not None:
            raise self.fail_with

    def _snapshots(self, handle):
        if isinstance(handle, FakeDocument):
            return [self.fetch_one(handle)]
        return [
            self._snapshot_for(handle, doc_id, data)
            for doc_id, data in self.data.get(handle.path, {}).items()
            if handle.matches(data)
        ]

    @staticmethod
    def _snapshot_for(handle, doc_id, data):
        if handle.path.startswith("quotes"):
            return TreeSnapshot(doc_id, dict(data))
        return FakeSnapshot(doc_id, data)

    # DatabaseBackend

    def connect(self, address: Address):
        if address.kind in (AddressKind.COLLECTION, AddressKind.TREE):
            return FakeCollection(address.path)
        if address.kind == AddressKind.DOCUMENT:
            return FakeDocument(address.path)
        raise UnsupportedOperationError(operation="connect")

    def child(self, handle, identifier: str):
        return FakeDocument(f"{handle.path}/{identifier}")

    def identifier(self, handle) -> Optional[str]:
        return handle.id

    def fetch_one(self, handle):
        self._record_call()
        data = self.data.get(handle.parent, {}).get(handle.id)
        return FakeSnapshot(handle.id, data)

    def fetch_all(self, handle):
        self._record_call()
        return self._snapshots(handle)

    def listen(self, handle, callback):
        self._record_call()
        listener = FakeListener(handle, callback)
        self.listeners.append(listener)
        callback(self._snapshots(handle), None)
        return listener

    def create(self, handle, fields: dict):
        self._record_call()
        doc_id = f"doc{next(self._ids)}"
        self.put(handle.path, doc_id, fields)
        return FakeDocument(f"{handle.path}/{doc_id}")

    def delete(self, handle) -> None:
        self._record_call()
        self.data.get(handle.parent, {}).pop(handle.id, None)


class BrokenPathBackend(InMemoryBackend):
    """Rejects every address the way a vendor SDK rejects a malformed path."""

    def connect(self, address: Address):
        raise ValueError(f"Malformed path: {address.path}")


class Completion:
    """Collects a callback result on the loop so a test can await it."""

    def __init__(self):
        self.future = asyncio.get_running_loop().create_future()
        self.threads: List[str] = []

    def success(self, *args):
        self.threads.append(threading.current_thread().name)
        if not self.future.done():
            self.future.set_result(args[0] if args else None)

    def failure(self, error):
        self.threads.append(threading.current_thread().name)
        if not self.future.done():
            self.future.set_exception(error)

    async def wait(self, timeout: float = 2.0):
        return await asyncio.wait_for(self.future, timeout)


async def drain(queues: WorkQueues) -> None:
    """Wait until queued background work and its foreground deliveries ran."""
    await asyncio.wrap_future(queues.background(lambda: None))
    await asyncio.sleep(0.01)

