"""
Per-model-type local cache of known records.
"""
from typing import Dict, Generic, List, Optional, Type, TypeVar

import structlog

from ..models.base import Record

R = TypeVar("R", bound=Record)

logger = structlog.get_logger()


class RecordCache(Generic[R]):
    """
    Ordered mirror of records known for one model type.

    Mutated from the background queue only; reads return a copy.
    """

    def __init__(self, model: Type[R]):
        self.model = model
        self._records: List[R] = []

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> List[R]:
        return list(self._records)

    def append(self, record: R) -> None:
        self._records.append(record)

    def replace(self, records: List[R]) -> None:
        self._records = list(records)

    def remove(self, ref_id: str) -> int:
        """Drop every record with this identifier, returning how many went."""
        before = len(self._records)
        self._records = [r for r in self._records if r.ref_id != ref_id]
        removed = before - len(self._records)
        logger.debug(
            "Cache entries removed",
            model=self.model.__name__,
            ref_id=ref_id,
            count=removed
        )
        return removed

    def clear(self) -> None:
        self._records = []


# Process-wide caches, one per model type
_caches: Dict[type, RecordCache] = {}


def get_cache(model: Type[R]) -> RecordCache[R]:
    """Get the shared cache for a model type."""
    cache = _caches.get(model)
    if cache is None:
        cache = _caches[model] = RecordCache(model)
    return cache


def reset_caches(model: Optional[type] = None) -> None:
    """Forget cached records for one model type, or for all of them."""
    if model is None:
        _caches.clear()
    else:
        _caches.pop(model, None)
