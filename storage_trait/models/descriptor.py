"""
Static per-type configuration describing where a model lives.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..utils.exceptions import ConfigurationError


class BackendKind(str, Enum):
    """Addressing mode of a model type."""
    COLLECTION = "collection"
    DOCUMENT = "document"
    KEY_TREE = "key_tree"


class AssetConfig(BaseModel):
    """Where a model's binary assets are stored."""

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(..., description="Folder inside the bucket, e.g. 'avatars'")
    bucket: Optional[str] = Field(default=None, description="Bucket name, defaults to the configured bucket")
    extension: Optional[str] = Field(default=None, description="Overrides the configured asset extension")
    placeholder: Optional[str] = Field(default=None, description="Placeholder image location")


class ModelDescriptor(BaseModel):
    """
    Backend addressing for one model type.

    `collection` places the type in a document collection, `document_path`
    pins it to a single document and `reference` places it under a key-tree
    path. A document path always wins over a collection.
    """

    model_config = ConfigDict(frozen=True)

    kind: BackendKind = BackendKind.COLLECTION
    collection: Optional[str] = None
    document: Optional[str] = None
    document_path: Optional[str] = None
    base_url: Optional[str] = None
    reference: Optional[str] = None
    assets: Optional[AssetConfig] = None

    @model_validator(mode="after")
    def check_addressing(self):
        if self.kind == BackendKind.KEY_TREE and not self.reference:
            raise ConfigurationError(
                message="Key-tree models need a reference path",
                details=[f"Base URL: {self.base_url}"]
            )
        if self.kind == BackendKind.COLLECTION and self.collection and self.document_path:
            raise ConfigurationError(
                message="A collection model cannot also name a document path",
                details=[
                    f"Collection: {self.collection}",
                    f"Document path: {self.document_path}"
                ]
            )
        return self
