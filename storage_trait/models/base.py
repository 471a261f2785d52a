"""
Base model for all records stored through the package.
"""
from enum import Enum
from typing import Any, ClassVar, Dict, NamedTuple, Optional, TypeVar
from uuid import UUID

import structlog
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic import ValidationError as PydanticValidationError

from .descriptor import ModelDescriptor

R = TypeVar("R", bound="Record")

logger = structlog.get_logger()


class AssetReference(NamedTuple):
    """Storage handle for a record's asset plus the placeholder to show meanwhile."""
    reference: Optional[Any]
    placeholder: Optional[str]


def _serialize_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return {k: _serialize_value(v) for k, v in value.model_dump(by_alias=True).items()}
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_serialize_value(item) for item in value]
    return value


class Record(BaseModel):
    """
    A model instance persisted in one of the backends.

    Subclasses set `descriptor` to say where the type lives. `ref_id` is the
    backend-assigned identifier; it is never written as a field.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    descriptor: ClassVar[ModelDescriptor]

    ref_id: Optional[str] = Field(default=None, exclude=True)

    _deleted: bool = PrivateAttr(default=False)

    @classmethod
    def from_snapshot(cls, snapshot: Any):
        """Build a record from a document or key-tree snapshot."""
        if snapshot is None or not getattr(snapshot, "exists", False):
            return cls.model_construct()

        data = snapshot.to_dict()
        if data is None:
            data = {}
        elif not isinstance(data, dict):
            data = {"value": data}
        try:
            return cls.model_validate({**data, "ref_id": snapshot.id})
        except PydanticValidationError as e:
            logger.warning(
                "Snapshot failed validation",
                model=cls.__name__,
                ref_id=snapshot.id,
                error=str(e)
            )
            return cls.model_construct(**{**data, "ref_id": snapshot.id})

    def to_field_mapping(self) -> Dict[str, Any]:
        """Plain field mapping for writes. Works on unsaved and partial records."""
        data = {}
        for name, field in type(self).model_fields.items():
            if name == "ref_id" or name not in self.__dict__:
                continue
            data[field.alias or name] = _serialize_value(self.__dict__[name])
        return data

    def with_ref_id(self: R, ref_id: str) -> R:
        """Copy of this record carrying a backend-assigned identifier."""
        record = self.model_copy(update={"ref_id": ref_id})
        record._deleted = False
        return record

    @property
    def is_saved(self) -> bool:
        return self.ref_id is not None

    @property
    def is_deleted(self) -> bool:
        return self._deleted

    def mark_deleted(self) -> None:
        self._deleted = True
