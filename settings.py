from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping

from pydantic import SecretStr

DEFAULT_DOCUMENT_KEY = "demodoc"


class BodyTextPolicy(str, Enum):
    # Invalid UTF-8 is replaced with U+FFFD.
    REPLACE = "replace"
    # Invalid UTF-8 fails the request as a body read error.
    STRICT = "strict"


class StoreBackend(str, Enum):
    MEMORY = "memory"
    DISK = "disk"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int | None) -> int | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class StoreConnectionArgs:
    bucket_name: str
    scope_name: str | None = None
    collection_name: str | None = None


def get_config_value(config: Mapping[str, str], secrets: Mapping[str, SecretStr], key: str) -> str:
    """
    Look a store setting up in secrets first, then in plain config.
    Empty values count as missing. Raises KeyError when neither has it.
    """
    secret = secrets.get(key)
    if secret is not None and secret.get_secret_value() != "":
        return secret.get_secret_value()
    value = config.get(key)
    if value:
        return value
    raise KeyError(f"key '{key}' not found in config or secrets")


def validate_store_config(
    config: Mapping[str, str], secrets: Mapping[str, SecretStr] | None = None
) -> StoreConnectionArgs:
    secrets = secrets or {}
    try:
        bucket_name = get_config_value(config, secrets, "bucketName")
    except KeyError as e:
        raise ValueError("bucketName config is required") from e

    # scopeName and collectionName are optional, and only meaningful together
    try:
        scope_name = get_config_value(config, secrets, "scopeName")
        collection_name = get_config_value(config, secrets, "collectionName")
    except KeyError:
        scope_name = collection_name = None

    return StoreConnectionArgs(bucket_name=bucket_name, scope_name=scope_name, collection_name=collection_name)


@dataclass(frozen=True)
class Settings:
    # Request handling
    default_document_key: str
    success_status_code: int
    response_media_type: str
    body_text_policy: BodyTextPolicy
    document_expiry_seconds: int | None

    # Debug
    debug_log_requests: bool

    # Store
    store_backend: StoreBackend
    data_dir: Path | None
    store_config: Mapping[str, str]


def get_settings() -> Settings:
    default_document_key = os.getenv("DEFAULT_DOCUMENT_KEY", DEFAULT_DOCUMENT_KEY) or DEFAULT_DOCUMENT_KEY

    success_status_code = _env_int("SUCCESS_STATUS_CODE", 200) or 200
    if not 200 <= success_status_code < 300:
        raise ValueError(f"SUCCESS_STATUS_CODE must be a 2xx code, got {success_status_code}")

    response_media_type = os.getenv("RESPONSE_MEDIA_TYPE", "text/plain; charset=utf-8")
    body_text_policy = BodyTextPolicy(os.getenv("BODY_TEXT_POLICY", "replace").strip().lower())
    document_expiry_seconds = _env_int("DOCUMENT_EXPIRY_SECONDS", None)
    if document_expiry_seconds is not None and document_expiry_seconds <= 0:
        raise ValueError(f"DOCUMENT_EXPIRY_SECONDS must be a positive number of seconds, got {document_expiry_seconds}")

    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", True)

    # Serverless filesystems are ephemeral; default to memory unless disk is asked for.
    store_backend = StoreBackend(os.getenv("STORE_BACKEND", "memory").strip().lower())
    raw_data_dir = (os.getenv("DATA_DIR") or "").strip()
    data_dir = Path(raw_data_dir) if raw_data_dir else None

    store_config = {
        "bucketName": os.getenv("STORE_BUCKET_NAME", "documents"),
        "scopeName": os.getenv("STORE_SCOPE_NAME", ""),
        "collectionName": os.getenv("STORE_COLLECTION_NAME", ""),
    }

    return Settings(
        default_document_key=default_document_key,
        success_status_code=success_status_code,
        response_media_type=response_media_type,
        body_text_policy=body_text_policy,
        document_expiry_seconds=document_expiry_seconds,
        debug_log_requests=debug_log_requests,
        store_backend=store_backend,
        data_dir=data_dir,
        store_config=store_config,
    )
