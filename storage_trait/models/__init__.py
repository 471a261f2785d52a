"""
Record base classes and per-type descriptors.
"""
from .base import AssetReference, Record
from .descriptor import AssetConfig, BackendKind, ModelDescriptor

__all__ = [
    "Record",
    "AssetReference",
    "ModelDescriptor",
    "BackendKind",
    "AssetConfig",
]
