"""
Snapshot mapping helpers shared by both backends.
"""
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Type, TypeVar

from ..models.base import Record

R = TypeVar("R", bound=Record)


@dataclass(frozen=True)
class TreeSnapshot:
    """
    One key-tree child, shaped like a document snapshot so the same
    `Record.from_snapshot` reads both.
    """
    key: Optional[str]
    value: Any

    @property
    def id(self) -> Optional[str]:
        return self.key

    @property
    def exists(self) -> bool:
        return self.value is not None

    def to_dict(self) -> Any:
        return self.value


def tree_children(value: Any) -> List[TreeSnapshot]:
    """Split a key-tree value into child snapshots, in key order."""
    if isinstance(value, dict):
        return [TreeSnapshot(str(key), child) for key, child in value.items()]
    if isinstance(value, list):
        # Trees with integer keys come back as sparse lists
        return [TreeSnapshot(str(index), child) for index, child in enumerate(value) if child is not None]
    return []


def map_snapshots(model: Type[R], snapshots: Iterable[Any]) -> List[R]:
    return [model.from_snapshot(snapshot) for snapshot in snapshots]
