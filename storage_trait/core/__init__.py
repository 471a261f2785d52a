"""
Resolution, mapping, query translation and the retrieval/mutation engines.
"""
from .cache import RecordCache, get_cache, reset_caches
from .mapper import TreeSnapshot, map_snapshots, tree_children
from .mutation import MutationEngine
from .query import QueryDescriptor, WhereClause, translate
from .resolver import (
    Address,
    AddressKind,
    resolve_asset,
    resolve_collection,
    resolve_container,
    resolve_document,
    resolve_for_kind,
    resolve_tree,
)
from .retrieval import RetrievalEngine

__all__ = [
    "Address",
    "AddressKind",
    "resolve_collection",
    "resolve_document",
    "resolve_tree",
    "resolve_container",
    "resolve_for_kind",
    "resolve_asset",
    "TreeSnapshot",
    "tree_children",
    "map_snapshots",
    "QueryDescriptor",
    "WhereClause",
    "translate",
    "RecordCache",
    "get_cache",
    "reset_caches",
    "RetrievalEngine",
    "MutationEngine",
]
