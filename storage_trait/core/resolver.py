"""
Address resolution from model descriptors.

Pure configuration lookup: nothing here talks to a backend, and an
unresolvable address is returned as None rather than raised.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import get_settings
from ..models.descriptor import BackendKind, ModelDescriptor


class AddressKind(str, Enum):
    COLLECTION = "collection"
    DOCUMENT = "document"
    TREE = "tree"
    ASSET = "asset"


@dataclass(frozen=True)
class Address:
    """A resolved backend location."""
    kind: AddressKind
    path: str
    base_url: Optional[str] = None

    def __str__(self) -> str:
        if self.base_url:
            return f"{self.base_url.rstrip('/')}/{self.path.lstrip('/')}"
        return self.path


def resolve_collection(descriptor: ModelDescriptor) -> Optional[Address]:
    """Collection address, only when the type is not pinned to a document."""
    if descriptor.collection and descriptor.document is None and descriptor.document_path is None:
        return Address(AddressKind.COLLECTION, descriptor.collection)
    return None


def resolve_document(descriptor: ModelDescriptor) -> Optional[Address]:
    if descriptor.document_path:
        return Address(AddressKind.DOCUMENT, descriptor.document_path)
    return None


def resolve_tree(descriptor: ModelDescriptor) -> Optional[Address]:
    if descriptor.kind != BackendKind.KEY_TREE or not descriptor.reference:
        return None
    base_url = descriptor.base_url or get_settings().firebase_database_url
    return Address(AddressKind.TREE, descriptor.reference, base_url)


def resolve_container(descriptor: ModelDescriptor) -> Optional[Address]:
    """Where new records of this type are written."""
    if descriptor.kind == BackendKind.KEY_TREE:
        return resolve_tree(descriptor)
    return resolve_collection(descriptor)


def resolve_for_kind(descriptor: ModelDescriptor) -> Optional[Address]:
    """The address reads use for this descriptor's kind."""
    if descriptor.kind == BackendKind.DOCUMENT:
        return resolve_document(descriptor)
    return resolve_container(descriptor)


def resolve_asset(descriptor: ModelDescriptor, identifier: Optional[str]) -> Optional[Address]:
    """Asset location for a saved record: <namespace>/<identifier><extension>."""
    assets = descriptor.assets
    if assets is None or not identifier:
        return None
    extension = assets.extension or get_settings().asset_extension
    path = f"{assets.namespace.strip('/')}/{identifier}{extension}"
    return Address(AddressKind.ASSET, path, assets.bucket)
