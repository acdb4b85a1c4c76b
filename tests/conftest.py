from __future__ import annotations

from dataclasses import replace
from pathlib import Path
import sys
from typing import Any


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from persistence.documents import GetResult, MutationMetadata, StoreError, StoreErrorKind  # noqa: E402
from persistence.memory_store import InMemoryDocumentStore  # noqa: E402
from settings import BodyTextPolicy, Settings, StoreBackend  # noqa: E402


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Redirect persistence paths to a temp project directory so tests never touch real ./data.
    """
    import persistence.paths as paths

    def _project_root() -> Path:
        return tmp_path

    def _data_dir() -> Path:
        p = tmp_path / "data"
        p.mkdir(parents=True, exist_ok=True)
        return p

    monkeypatch.setattr(paths, "project_root", _project_root)
    monkeypatch.setattr(paths, "data_dir", _data_dir)
    return tmp_path


@pytest.fixture
def settings() -> Settings:
    return Settings(
        default_document_key="demodoc",
        success_status_code=200,
        response_media_type="text/plain; charset=utf-8",
        body_text_policy=BodyTextPolicy.REPLACE,
        document_expiry_seconds=None,
        debug_log_requests=True,
        store_backend=StoreBackend.MEMORY,
        data_dir=None,
        store_config={"bucketName": "documents"},
    )


@pytest.fixture
def strict_settings(settings: Settings) -> Settings:
    return replace(settings, body_text_policy=BodyTextPolicy.STRICT)


class RecordingStore:
    """
    Async store double: records calls, delegates to an in-memory store and can
    be told to fail either operation or to hand back a different document.
    """

    def __init__(self) -> None:
        self.backing = InMemoryDocumentStore()
        self.calls: list[tuple[str, str]] = []
        self.fail_upsert: Exception | None = None
        self.fail_get: Exception | None = None
        self.get_document: Any = None

    async def upsert(self, key, document, options=None) -> MutationMetadata:
        self.calls.append(("upsert", key))
        if self.fail_upsert is not None:
            raise self.fail_upsert
        return self.backing.upsert(key, document, options)

    async def get(self, key, options=None) -> GetResult:
        self.calls.append(("get", key))
        if self.fail_get is not None:
            raise self.fail_get
        result = self.backing.get(key, options)
        if self.get_document is not None:
            return result.model_copy(update={"document": self.get_document})
        return result


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def store_error():
    def _make(kind: StoreErrorKind = StoreErrorKind.OTHER) -> StoreError:
        return StoreError(kind)

    return _make
