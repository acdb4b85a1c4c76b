from __future__ import annotations

from pathlib import Path

DEFAULT_SCOPE = "_default"
DEFAULT_COLLECTION = "_default"


def project_root() -> Path:
    # persistence/paths.py -> persistence -> project root
    return Path(__file__).resolve().parents[1]


def data_dir() -> Path:
    return ensure_dir(project_root() / "data")


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def documents_dir(data_dir: Path) -> Path:
    return ensure_dir(data_dir / "documents")


def collection_path(data_dir: Path, bucket: str, scope: str = DEFAULT_SCOPE, collection: str = DEFAULT_COLLECTION) -> Path:
    bucket_dir = ensure_dir(documents_dir(data_dir) / _safe_segment(bucket) / _safe_segment(scope))
    return bucket_dir / f"{_safe_segment(collection)}.json"


def _safe_segment(name: str) -> str:
    cleaned = name.strip().replace("/", "_").replace("\\", "_")
    if cleaned in ("", ".", ".."):
        raise ValueError(f"invalid path segment: {name!r}")
    return cleaned
