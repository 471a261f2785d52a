"""
Mutation engine: create and delete records, keeping the local cache in step.
"""
from typing import Any, Callable, Generic, Optional, Type, TypeVar

import structlog

from ..models.base import Record
from ..utils.dispatch import WorkQueues
from ..utils.exceptions import InvalidReferenceError, TransportError, as_storage_error
from .cache import RecordCache
from .resolver import resolve_container

R = TypeVar("R", bound=Record)

logger = structlog.get_logger()

FailureCompletion = Optional[Callable[[BaseException], None]]


def _deleted_record_error(record: Record) -> InvalidReferenceError:
    return InvalidReferenceError(
        message="Record has already been deleted",
        code="RECORD_DELETED",
        details=[f"Reference: {record.ref_id}"]
    )


class MutationEngine(Generic[R]):
    """Writes records of one model type. Calls run on the background queue."""

    def __init__(self, model: Type[R], backend: Any, queues: WorkQueues, cache: RecordCache):
        self.model = model
        self._backend = backend
        self._queues = queues
        self._cache = cache

    def create(
        self,
        record: R,
        completion: Optional[Callable[[Any], None]] = None,
        failure: FailureCompletion = None
    ) -> None:
        """Write a new record; completion receives the new backend reference."""
        self._queues.background(self._create, record, completion, failure)

    def _create(self, record: R, completion, failure) -> None:
        if record.is_deleted:
            self._queues.foreground(failure, _deleted_record_error(record))
            return

        address = resolve_container(self.model.descriptor)
        if address is None:
            logger.warning("Create skipped, no collection configured", model=self.model.__name__)
            return

        try:
            container = self._backend.connect(address)
            ref = self._backend.create(container, record.to_field_mapping())
            ref_id = self._backend.identifier(ref)
        except Exception as e:
            error = as_storage_error(e)
            logger.warning("Create failed", model=self.model.__name__, error=str(error))
            self._queues.foreground(failure, error)
            return

        if ref_id is None:
            self._queues.foreground(failure, TransportError(message="Backend returned no identifier"))
            logger.critical("Backend created a record without an identifier", model=self.model.__name__)
            return

        self._cache.append(record.with_ref_id(ref_id))
        logger.info("Record created", model=self.model.__name__, ref_id=ref_id, cached=len(self._cache))
        self._queues.foreground(completion, ref)

    def delete(
        self,
        record: R,
        completion: Optional[Callable[[], None]] = None,
        failure: FailureCompletion = None
    ) -> None:
        """Delete a saved record. Unsaved records and unaddressable types are a no-op."""
        self._queues.background(self._delete, record, completion, failure)

    def _delete(self, record: R, completion, failure) -> None:
        address = resolve_container(self.model.descriptor)
        if address is None or record.ref_id is None:
            logger.debug(
                "Delete skipped",
                model=self.model.__name__,
                has_address=address is not None,
                ref_id=record.ref_id
            )
            return

        if record.is_deleted:
            self._queues.foreground(failure, _deleted_record_error(record))
            return

        try:
            handle = self._backend.child(self._backend.connect(address), record.ref_id)
            self._backend.delete(handle)
        except Exception as e:
            error = as_storage_error(e)
            logger.warning("Delete failed", model=self.model.__name__, ref_id=record.ref_id, error=str(error))
            self._queues.foreground(failure, error)
            return

        removed = self._cache.remove(record.ref_id)
        record.mark_deleted()
        logger.info("Record deleted", model=self.model.__name__, ref_id=record.ref_id, removed=removed)
        self._queues.foreground(completion)
