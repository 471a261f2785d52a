"""
Generic repository: the data-retrieval surface for one model type.
"""
from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

import structlog
from reactivex import Observable

from .core.cache import RecordCache, get_cache
from .core.mutation import MutationEngine
from .core.query import WhereClause
from .core.resolver import resolve_asset, resolve_collection, resolve_container
from .core.retrieval import RetrievalEngine
from .infrastructure.base import DatabaseBackend
from .infrastructure.storage import AssetStorage
from .models.base import AssetReference, Record
from .utils.dispatch import WorkQueues

R = TypeVar("R", bound=Record)

logger = structlog.get_logger()


class Repository(Generic[R]):
    """
    Fetch, query, subscribe, create and delete records of `model`.

    The model's descriptor picks the address; `backend` is the adapter for
    the database the descriptor points at. Completions run on the
    foreground loop of `queues`.

    Example:
        async def main():
            repo = Repository(User, FirestoreBackend(), WorkQueues.create())
            users = await repo.get()
            repo.query("status", WhereClause.EQUAL, "open").subscribe(on_next=print)
    """

    def __init__(
        self,
        model: Type[R],
        backend: DatabaseBackend,
        queues: WorkQueues,
        storage: Optional[AssetStorage] = None,
        cache: Optional[RecordCache] = None
    ):
        self.model = model
        self.backend = backend
        self.queues = queues
        self.storage = storage
        self.cache = cache if cache is not None else get_cache(model)
        self._retrieval = RetrievalEngine(model, backend, queues, self.cache)
        self._mutation = MutationEngine(model, backend, queues, self.cache)

    @property
    def objects(self) -> List[R]:
        """Records currently known locally for this type."""
        return self.cache.records

    # Reads

    def get_data(
        self,
        completion: Optional[Callable[[List[R]], None]] = None,
        failure: Optional[Callable[[BaseException], None]] = None
    ) -> None:
        self._retrieval.fetch(completion, failure)

    async def get(self) -> List[R]:
        return await self._retrieval.get()

    def fetch_observable(self) -> Observable:
        return self._retrieval.fetch_observable()

    def query(self, field: Optional[str] = None, where: Optional[WhereClause] = None, value: Any = None) -> Observable:
        return self._retrieval.query(field, where, value)

    def subscribe(self) -> Observable:
        return self._retrieval.subscribe()

    def observe(
        self,
        completion: Callable[[List[R]], None],
        failure: Optional[Callable[[BaseException], None]] = None
    ):
        return self._retrieval.observe(completion, failure)

    # Writes

    def add(
        self,
        record: R,
        completion: Optional[Callable[[Any], None]] = None,
        failure: Optional[Callable[[BaseException], None]] = None
    ) -> None:
        self._mutation.create(record, completion, failure)

    def delete(
        self,
        record: R,
        completion: Optional[Callable[[], None]] = None,
        failure: Optional[Callable[[BaseException], None]] = None
    ) -> None:
        self._mutation.delete(record, completion, failure)

    # References

    def collection_ref(self) -> Optional[Any]:
        address = resolve_collection(self.model.descriptor)
        return self.backend.connect(address) if address is not None else None

    def document_ref(self, record: R) -> Optional[Any]:
        address = resolve_container(self.model.descriptor)
        if address is None or record.ref_id is None:
            return None
        return self.backend.child(self.backend.connect(address), record.ref_id)

    def asset_ref(self, record: R) -> AssetReference:
        """Asset handle and placeholder; both None for unsaved records."""
        assets = self.model.descriptor.assets
        address = resolve_asset(self.model.descriptor, record.ref_id)
        if address is None or self.storage is None:
            return AssetReference(None, None)
        return AssetReference(self.storage.asset(address), assets.placeholder)
