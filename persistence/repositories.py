from __future__ import annotations

import asyncio
import logging

from settings import Settings, StoreBackend, validate_store_config

from .disk_store import DiskDocumentStore
from .documents import Document, GetOptions, GetResult, MutationMetadata, UpsertOptions
from .interfaces import AsyncDocumentStoreClient, DocumentStoreClient
from .memory_store import InMemoryDocumentStore
from . import paths
from .paths import DEFAULT_COLLECTION, DEFAULT_SCOPE

logger = logging.getLogger(__name__)


class AsyncDocumentStore(AsyncDocumentStoreClient):
    """
    Async wrapper around a synchronous document store.
    Uses asyncio.to_thread to avoid blocking the event loop on store I/O.
    """

    def __init__(self, store: DocumentStoreClient) -> None:
        self._store = store

    async def upsert(self, key: str, document: Document, options: UpsertOptions | None = None) -> MutationMetadata:
        return await asyncio.to_thread(self._store.upsert, key, document, options)

    async def get(self, key: str, options: GetOptions | None = None) -> GetResult:
        return await asyncio.to_thread(self._store.get, key, options)


def build_document_store(settings: Settings) -> DocumentStoreClient:
    args = validate_store_config(settings.store_config)

    if settings.store_backend is StoreBackend.MEMORY:
        logger.info("STORE: using in-memory bucket %r", args.bucket_name)
        return InMemoryDocumentStore(args.bucket_name)

    root = settings.data_dir or paths.data_dir()
    store = DiskDocumentStore(
        root,
        args.bucket_name,
        args.scope_name or DEFAULT_SCOPE,
        args.collection_name or DEFAULT_COLLECTION,
    )
    logger.info("STORE: using disk collection %s", store.path)
    return store
