from __future__ import annotations

import threading
import time
from typing import Callable, MutableMapping

from .documents import (
    Document,
    GetOptions,
    GetResult,
    MutationMetadata,
    StoredEntry,
    StoreError,
    StoreErrorKind,
    UpsertOptions,
    require_raw,
    validate_key,
)
from .interfaces import DocumentStoreClient

Clock = Callable[[], int]


def upsert_entry(
    entries: MutableMapping[str, StoredEntry],
    key: str,
    document: Document,
    options: UpsertOptions | None,
    *,
    bucket: str,
    now_ns: int,
) -> MutationMetadata:
    validate_key(key)
    raw = require_raw(document)

    previous = entries.get(key)
    cas = (previous.cas if previous is not None else 0) + 1
    expires_at_ns = None
    if options is not None and options.expires_in_ns:
        expires_at_ns = now_ns + int(options.expires_in_ns)

    entries[key] = StoredEntry(document=raw, cas=cas, expires_at_ns=expires_at_ns)
    return MutationMetadata(cas=cas, bucket=bucket, key=key)


def get_entry(
    entries: MutableMapping[str, StoredEntry],
    key: str,
    options: GetOptions | None,
    *,
    now_ns: int,
) -> GetResult:
    validate_key(key)
    entry = entries.get(key)
    if entry is not None and entry.is_expired(now_ns):
        # expire eagerly
        entries.pop(key, None)
        entry = None
    if entry is None:
        raise StoreError(StoreErrorKind.NOT_FOUND, f"document {key!r} not found")

    with_expiry = options is not None and options.with_expiry
    return GetResult(
        document=entry.document,
        cas=entry.cas,
        expires_in_ns=entry.remaining_ns(now_ns) if with_expiry else None,
    )


class InMemoryDocumentStore(DocumentStoreClient):
    """
    Process-local document store. Nothing survives a restart; serverless-friendly default.
    """

    def __init__(self, bucket: str = "documents", *, clock: Clock = time.time_ns) -> None:
        self._bucket = bucket
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, StoredEntry] = {}

    @property
    def bucket(self) -> str:
        return self._bucket

    def upsert(self, key: str, document: Document, options: UpsertOptions | None = None) -> MutationMetadata:
        with self._lock:
            return upsert_entry(self._entries, key, document, options, bucket=self._bucket, now_ns=self._clock())

    def get(self, key: str, options: GetOptions | None = None) -> GetResult:
        with self._lock:
            return get_entry(self._entries, key, options, now_ns=self._clock())

    def remove(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def exists(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(self._clock())
