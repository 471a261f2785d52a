"""
Single-field query translation.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from google.cloud.firestore_v1.base_query import FieldFilter


class WhereClause(str, Enum):
    EQUAL = "equal"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"


OPERATORS = {
    WhereClause.EQUAL: "==",
    WhereClause.LESS_THAN: "<",
    WhereClause.LESS_THAN_OR_EQUAL: "<=",
    WhereClause.GREATER_THAN: ">",
    WhereClause.GREATER_THAN_OR_EQUAL: ">=",
}


@dataclass(frozen=True)
class QueryDescriptor:
    field: Optional[str] = None
    where: Optional[WhereClause] = None
    value: Any = None

    @property
    def is_filtered(self) -> bool:
        return self.field is not None and self.where is not None


def translate(query: Optional[QueryDescriptor], base: Any) -> Any:
    """
    Apply the query to a collection reference.

    Returns `base` unchanged when the query has no field/comparator pair.
    """
    if query is None or not query.is_filtered:
        return base
    operator = OPERATORS[WhereClause(query.where)]
    return base.where(filter=FieldFilter(query.field, operator, query.value))
