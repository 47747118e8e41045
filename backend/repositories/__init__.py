"""Persistence layer: abstract interface and the JSON snapshot implementation."""

from .base import StoreProtocol
from .document_store import DocumentStore
from .errors import (
    ConflictError,
    MalformedSnapshotError,
    MissingRequiredFieldError,
    NotFoundError,
    StoreError,
    UnknownCollectionError,
)
from .schema import COLLECTIONS, Collection, collection_spec, default_schema
from .snapshot import SnapshotFile, resolve_database_path

__all__ = [
    "StoreProtocol",
    "DocumentStore",
    "SnapshotFile",
    "resolve_database_path",
    "Collection",
    "COLLECTIONS",
    "collection_spec",
    "default_schema",
    "StoreError",
    "MalformedSnapshotError",
    "MissingRequiredFieldError",
    "NotFoundError",
    "ConflictError",
    "UnknownCollectionError",
]
