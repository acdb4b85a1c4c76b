from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

# Couchbase document ids are limited to 250 bytes.
MAX_KEY_BYTES = 250


class RawDocument(BaseModel):
    kind: Literal["raw"] = "raw"
    value: str


class JsonDocument(BaseModel):
    kind: Literal["json"] = "json"
    value: Any = None


Document = Annotated[Union[RawDocument, JsonDocument], Field(discriminator="kind")]


class UpsertOptions(BaseModel):
    timeout_ns: int | None = None
    expires_in_ns: int | None = None


class GetOptions(BaseModel):
    timeout_ns: int | None = None
    with_expiry: bool = False


class MutationMetadata(BaseModel):
    cas: int
    bucket: str
    key: str


class GetResult(BaseModel):
    document: Document
    cas: int
    expires_in_ns: int | None = None


class StoredEntry(BaseModel):
    """
    One document as a store keeps it:
      { "document": {"kind": "raw", "value": "..."}, "cas": 3, "expires_at_ns": null }
    """

    document: Document
    cas: int
    expires_at_ns: int | None = None

    def is_expired(self, now_ns: int) -> bool:
        return self.expires_at_ns is not None and now_ns >= self.expires_at_ns

    def remaining_ns(self, now_ns: int) -> int | None:
        if self.expires_at_ns is None:
            return None
        return max(0, self.expires_at_ns - now_ns)


class StoreErrorKind(str, Enum):
    NOT_FOUND = "not-found"
    ALREADY_EXISTS = "already-exists"
    NOT_JSON = "not-json"
    INVALID_VALUE = "invalid-value"
    OTHER = "other"


class StoreError(Exception):
    """Raised by document stores when an operation cannot be applied."""

    def __init__(self, kind: StoreErrorKind, message: str = ""):
        self.kind = kind
        self.message = message or kind.value
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"StoreError({self.kind.value!r}, {self.message!r})"


def validate_key(key: str) -> None:
    if not key:
        raise StoreError(StoreErrorKind.INVALID_VALUE, "document key must not be empty")
    if len(key.encode("utf-8")) > MAX_KEY_BYTES:
        raise StoreError(StoreErrorKind.INVALID_VALUE, f"document key exceeds {MAX_KEY_BYTES} bytes")


def require_raw(document: Any) -> RawDocument:
    if not isinstance(document, RawDocument):
        raise StoreError(StoreErrorKind.NOT_JSON, "only raw documents can be stored")
    return document
