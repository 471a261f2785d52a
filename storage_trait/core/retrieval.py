"""
Retrieval engine: resolve, fetch or listen, map, deliver.

One-shot reads deliver through callbacks; queries and subscriptions are
reactive streams. Every delivery happens on the foreground queue.
"""
from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

import reactivex as rx
import structlog
from reactivex import Observable
from reactivex.disposable import Disposable

from ..models.base import Record
from ..utils.dispatch import WorkQueues
from ..utils.exceptions import (
    InvalidReferenceError,
    NoDataError,
    UnsupportedOperationError,
    as_storage_error,
)
from .cache import RecordCache
from .mapper import map_snapshots
from .query import QueryDescriptor, WhereClause, translate
from .resolver import Address, AddressKind, resolve_collection, resolve_for_kind

R = TypeVar("R", bound=Record)

logger = structlog.get_logger()

Completion = Optional[Callable[[List[R]], None]]
FailureCompletion = Optional[Callable[[BaseException], None]]


class StreamState:
    """Cancellation flag and backend listener of one stream subscription."""

    def __init__(self):
        self.cancelled = False
        self.listener: Optional[Any] = None

    def guard(self, fn: Callable[..., None]) -> Callable[..., None]:
        """Wrap a delivery so it is dropped once the stream is cancelled."""
        def deliver(*args):
            if not self.cancelled:
                fn(*args)
        return deliver

    def attach(self, listener: Any) -> None:
        self.listener = listener
        if self.cancelled:
            listener.cancel()

    def cancel(self) -> None:
        self.cancelled = True
        listener = self.listener
        if listener is not None:
            listener.cancel()


class RetrievalEngine(Generic[R]):
    """Reads records of one model type."""

    def __init__(self, model: Type[R], backend: Any, queues: WorkQueues, cache: RecordCache):
        self.model = model
        self._backend = backend
        self._queues = queues
        self._cache = cache

    # One-shot

    def fetch(self, completion: Completion = None, failure: FailureCompletion = None) -> None:
        """Fetch every record once. An empty read is delivered as NoDataError."""
        self._queues.background(self._fetch, completion, failure)

    def _fetch(self, completion: Completion, failure: FailureCompletion) -> None:
        address = resolve_for_kind(self.model.descriptor)
        if address is None:
            logger.warning("Fetch unsupported, no address configured", model=self.model.__name__)
            self._queues.foreground(
                failure,
                UnsupportedOperationError(model_name=self.model.__name__, operation="fetch")
            )
            return

        try:
            handle = self._backend.connect(address)
            if address.kind == AddressKind.DOCUMENT:
                snapshot = self._backend.fetch_one(handle)
                snapshots = [snapshot] if snapshot is not None and snapshot.exists else []
            else:
                snapshots = self._backend.fetch_all(handle)
        except Exception as e:
            self._queues.foreground(failure, as_storage_error(e))
            return

        if not snapshots:
            self._queues.foreground(failure, NoDataError(path=str(address)))
            return

        records = map_snapshots(self.model, snapshots)
        if address.kind == AddressKind.COLLECTION:
            self._cache.replace(records)

        logger.debug("Records fetched", model=self.model.__name__, path=str(address), count=len(records))
        self._queues.foreground(completion, records)

    def fetch_observable(self) -> Observable:
        """The one-shot fetch as a stream that emits once and completes."""
        def on_subscribe(observer, scheduler=None):
            state = StreamState()

            def completion(records):
                observer.on_next(records)
                observer.on_completed()

            self.fetch(state.guard(completion), state.guard(observer.on_error))
            return Disposable(state.cancel)

        return rx.create(on_subscribe)

    async def get(self) -> List[R]:
        """Await the one-shot fetch on the foreground loop."""
        future = self._queues.loop.create_future()

        def completion(records):
            if not future.done():
                future.set_result(records)

        def failure(error):
            if not future.done():
                future.set_exception(error)

        self.fetch(completion, failure)
        return await future

    # Streams

    def query(self, field: Optional[str] = None, where: Optional[WhereClause] = None, value: Any = None) -> Observable:
        """Live query on the collection, filtered on one field when given."""
        query = QueryDescriptor(field, WhereClause(where) if where is not None else None, value)
        return self._stream(resolve_collection(self.model.descriptor), query)

    def subscribe(self) -> Observable:
        """Live stream of every record at the descriptor's address."""
        return self._stream(resolve_for_kind(self.model.descriptor), None)

    def observe(self, completion: Completion, failure: FailureCompletion = None):
        """Streaming callback form of subscribe(). Returns the disposable."""
        return self.subscribe().subscribe(
            on_next=completion,
            on_error=failure or self._log_stream_error
        )

    def _stream(self, address: Optional[Address], query: Optional[QueryDescriptor]) -> Observable:
        model = self.model

        def on_subscribe(observer, scheduler=None):
            state = StreamState()

            if address is None:
                logger.warning(
                    "Failed to retrieve collection, invalid collection ref",
                    model=model.__name__,
                    collection=model.descriptor.collection
                )
                self._queues.foreground(
                    state.guard(observer.on_error),
                    InvalidReferenceError(details=[f"Model: {model.__name__}"])
                )
                return Disposable(state.cancel)

            def handle_batch(snapshots, error):
                if snapshots is None:
                    if error is not None:
                        logger.warning("Failed to retrieve documents", model=model.__name__, error=str(error))
                        self._queues.foreground(state.guard(observer.on_error), error)
                    else:
                        logger.debug("Dropped listener callback without snapshot or error", model=model.__name__)
                    return
                records = map_snapshots(model, snapshots)
                self._queues.foreground(state.guard(observer.on_next), records)

            def start():
                if state.cancelled:
                    return
                try:
                    handle = translate(query, self._backend.connect(address))
                    listener = self._backend.listen(handle, handle_batch)
                except Exception as e:
                    handle_batch(None, as_storage_error(e))
                    return
                state.attach(listener)

            self._queues.background(start)
            return Disposable(state.cancel)

        return rx.create(on_subscribe)

    def _log_stream_error(self, error: BaseException) -> None:
        logger.error("Stream terminated", model=self.model.__name__, error=str(error))
