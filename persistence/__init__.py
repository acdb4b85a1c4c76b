from __future__ import annotations

from .disk_store import DiskDocumentStore, DiskJsonDocumentStore
from .documents import (
    Document,
    GetOptions,
    GetResult,
    JsonDocument,
    MutationMetadata,
    RawDocument,
    StoreError,
    StoreErrorKind,
    UpsertOptions,
)
from .interfaces import AsyncDocumentStoreClient, DocumentStoreClient
from .memory_store import InMemoryDocumentStore
from .repositories import AsyncDocumentStore, build_document_store

__all__ = [
    "Document",
    "RawDocument",
    "JsonDocument",
    "UpsertOptions",
    "GetOptions",
    "GetResult",
    "MutationMetadata",
    "StoreError",
    "StoreErrorKind",
    "DocumentStoreClient",
    "AsyncDocumentStoreClient",
    "InMemoryDocumentStore",
    "DiskJsonDocumentStore",
    "DiskDocumentStore",
    "AsyncDocumentStore",
    "build_document_store",
]
