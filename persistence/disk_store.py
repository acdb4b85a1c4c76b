from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from json_store import atomic_write_json, read_json

from .documents import Document, GetOptions, GetResult, MutationMetadata, StoredEntry, UpsertOptions
from .interfaces import DocumentStoreClient, KeyValueDocumentStore
from .locks import GLOBAL_PATH_LOCKS
from .memory_store import Clock, get_entry, upsert_entry
from .paths import DEFAULT_COLLECTION, DEFAULT_SCOPE, collection_path

logger = logging.getLogger(__name__)


class DiskJsonDocumentStore(KeyValueDocumentStore):
    """
    Stores a single JSON document on disk at a fixed path.

    - Always returns a dict (empty dict on missing/invalid JSON).
    - Writes atomically.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        with GLOBAL_PATH_LOCKS.lock_for(self._path):
            raw = read_json(self._path)
            return raw if isinstance(raw, dict) else {}

    def save(self, doc: dict[str, Any]) -> None:
        with GLOBAL_PATH_LOCKS.lock_for(self._path):
            atomic_write_json(self._path, doc)


class DiskDocumentStore(DocumentStoreClient):
    """
    Keeps one collection per JSON file:

      data/documents/<bucket>/<scope>/<collection>.json
      { "<key>": { "document": {"kind": "raw", "value": "..."}, "cas": 1, "expires_at_ns": null } }

    Every operation loads, modifies and saves the file under the path lock.
    """

    def __init__(
        self,
        data_dir: Path,
        bucket: str,
        scope: str = DEFAULT_SCOPE,
        collection: str = DEFAULT_COLLECTION,
        *,
        clock: Clock = time.time_ns,
    ) -> None:
        self._bucket = bucket
        self._clock = clock
        self._file = DiskJsonDocumentStore(collection_path(data_dir, bucket, scope, collection))

    @property
    def path(self) -> Path:
        return self._file.path

    def upsert(self, key: str, document: Document, options: UpsertOptions | None = None) -> MutationMetadata:
        with GLOBAL_PATH_LOCKS.lock_for(self._file.path):
            entries = self._load_entries()
            meta = upsert_entry(entries, key, document, options, bucket=self._bucket, now_ns=self._clock())
            self._save_entries(entries)
            return meta

    def get(self, key: str, options: GetOptions | None = None) -> GetResult:
        with GLOBAL_PATH_LOCKS.lock_for(self._file.path):
            entries = self._load_entries()
            before = len(entries)
            try:
                return get_entry(entries, key, options, now_ns=self._clock())
            finally:
                if len(entries) != before:
                    self._save_entries(entries)

    def remove(self, key: str) -> bool:
        with GLOBAL_PATH_LOCKS.lock_for(self._file.path):
            entries = self._load_entries()
            if entries.pop(key, None) is None:
                return False
            self._save_entries(entries)
            return True

    def exists(self, key: str) -> bool:
        entry = self._load_entries().get(key)
        return entry is not None and not entry.is_expired(self._clock())

    def _load_entries(self) -> dict[str, StoredEntry]:
        entries: dict[str, StoredEntry] = {}
        for k, v in self._file.load().items():
            try:
                entries[str(k)] = StoredEntry.model_validate(v)
            except ValidationError as e:
                logger.warning("DISK STORE: dropping malformed entry %r in %s: %s", k, self._file.path, e)
        return entries

    def _save_entries(self, entries: dict[str, StoredEntry]) -> None:
        self._file.save({k: v.model_dump(mode="json") for k, v in entries.items()})
