from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import SecretStr

from settings import (
    BodyTextPolicy,
    StoreBackend,
    get_config_value,
    get_settings,
    validate_store_config,
)


def test_get_config_value_prefers_secrets():
    config = {"bucketName": "from-config", "scopeName": "s"}
    secrets = {"bucketName": SecretStr("from-secret"), "scopeName": SecretStr("")}

    assert get_config_value(config, secrets, "bucketName") == "from-secret"
    # empty secrets fall through to config
    assert get_config_value(config, secrets, "scopeName") == "s"
    with pytest.raises(KeyError):
        get_config_value(config, secrets, "nonexistent")


def test_validate_store_config_optional_scope_and_collection():
    args = validate_store_config({"bucketName": "b"})
    assert (args.bucket_name, args.scope_name, args.collection_name) == ("b", None, None)

    args = validate_store_config({"bucketName": "b", "scopeName": "s", "collectionName": "c"})
    assert (args.scope_name, args.collection_name) == ("s", "c")

    # a scope without a collection falls back to the defaults
    args = validate_store_config({"bucketName": "b", "scopeName": "s"})
    assert (args.scope_name, args.collection_name) == (None, None)


def test_validate_store_config_bucket_from_secret():
    args = validate_store_config({}, {"bucketName": SecretStr("hidden")})
    assert args.bucket_name == "hidden"


def test_validate_store_config_requires_bucket():
    with pytest.raises(ValueError, match="bucketName config is required"):
        validate_store_config({"scopeName": "s"})


def test_get_settings_defaults(monkeypatch):
    for name in (
        "DEFAULT_DOCUMENT_KEY",
        "SUCCESS_STATUS_CODE",
        "RESPONSE_MEDIA_TYPE",
        "BODY_TEXT_POLICY",
        "DOCUMENT_EXPIRY_SECONDS",
        "DEBUG_LOG_REQUESTS",
        "STORE_BACKEND",
        "DATA_DIR",
        "STORE_BUCKET_NAME",
    ):
        monkeypatch.delenv(name, raising=False)

    s = get_settings()

    assert s.default_document_key == "demodoc"
    assert s.success_status_code == 200
    assert s.body_text_policy is BodyTextPolicy.REPLACE
    assert s.document_expiry_seconds is None
    assert s.store_backend is StoreBackend.MEMORY
    assert s.data_dir is None
    assert s.store_config["bucketName"] == "documents"


def test_get_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DEFAULT_DOCUMENT_KEY", "home")
    monkeypatch.setenv("SUCCESS_STATUS_CODE", "201")
    monkeypatch.setenv("BODY_TEXT_POLICY", "STRICT")
    monkeypatch.setenv("DOCUMENT_EXPIRY_SECONDS", "30")
    monkeypatch.setenv("DEBUG_LOG_REQUESTS", "off")
    monkeypatch.setenv("STORE_BACKEND", "disk")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))

    s = get_settings()

    assert s.default_document_key == "home"
    assert s.success_status_code == 201
    assert s.body_text_policy is BodyTextPolicy.STRICT
    assert s.document_expiry_seconds == 30
    assert s.debug_log_requests is False
    assert s.store_backend is StoreBackend.DISK
    assert s.data_dir == Path(tmp_path)


@pytest.mark.parametrize(
    "name,value",
    [
        ("SUCCESS_STATUS_CODE", "500"),
        ("SUCCESS_STATUS_CODE", "abc"),
        ("BODY_TEXT_POLICY", "ignore"),
        ("DOCUMENT_EXPIRY_SECONDS", "0"),
        ("DOCUMENT_EXPIRY_SECONDS", "-5"),
    ],
)
def test_get_settings_rejects_bad_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        get_settings()
