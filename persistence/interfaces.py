from __future__ import annotations

from typing import Any, Protocol

from .documents import Document, GetOptions, GetResult, MutationMetadata, UpsertOptions


class KeyValueDocumentStore(Protocol):
    """
    A single JSON-like document persisted under a fixed location.
    """

    def load(self) -> dict[str, Any]:
        """Load and return the full document (never None)."""
        ...

    def save(self, doc: dict[str, Any]) -> None:
        """Persist the full document atomically."""
        ...


class DocumentStoreClient(Protocol):
    """
    The two operations the gateway needs from a document store.
    Both raise StoreError on failure.
    """

    def upsert(self, key: str, document: Document, options: UpsertOptions | None = None) -> MutationMetadata:
        ...

    def get(self, key: str, options: GetOptions | None = None) -> GetResult:
        ...


class AsyncDocumentStoreClient(Protocol):
    async def upsert(self, key: str, document: Document, options: UpsertOptions | None = None) -> MutationMetadata: ...
    async def get(self, key: str, options: GetOptions | None = None) -> GetResult: ...
