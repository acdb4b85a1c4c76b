from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass
from enum import Enum
from typing import AsyncGenerator, Union

from fastapi.responses import PlainTextResponse, Response

from persistence.documents import RawDocument, StoreError, UpsertOptions
from persistence.interfaces import AsyncDocumentStoreClient
from settings import DEFAULT_DOCUMENT_KEY, BodyTextPolicy, Settings

logger = logging.getLogger(__name__)

FAILURE_STATUS_CODE = 500


class BodyReadError(Exception):
    """The request body could not be read completely or is not valid text."""


class FailureKind(str, Enum):
    BODY_READ = "body-read"
    UPSERT = "upsert"
    GET = "get"
    DECODE = "decode"

    @property
    def message(self) -> str:
        return FAILURE_MESSAGES[self]


FAILURE_MESSAGES: dict[FailureKind, str] = {
    FailureKind.BODY_READ: "Failed to read request body",
    FailureKind.UPSERT: "Failed to upsert document",
    FailureKind.GET: "Failed to get document",
    FailureKind.DECODE: "Error decoding value",
}


@dataclass(frozen=True)
class Succeeded:
    key: str
    value: bytes


@dataclass(frozen=True)
class Failed:
    key: str
    kind: FailureKind


Outcome = Union[Succeeded, Failed]


def document_key_from_path(path: str | None, default: str = DEFAULT_DOCUMENT_KEY) -> str:
    """
    "/greeting" -> "greeting", "/a?b" -> "a?b", "/" / "" / None -> default.

    Only one leading "/" is removed; the rest of the path is kept verbatim.
    """
    if not path:
        return default
    if path.startswith("/"):
        path = path[1:]
    return path or default


async def read_body(chunks: AsyncGenerator[bytes, None]) -> bytes:
    """Drain the body stream into memory, closing the stream on every exit."""
    buf = bytearray()
    try:
        async with contextlib.aclosing(chunks) as stream:
            async for chunk in stream:
                buf.extend(chunk)
    except Exception as e:
        raise BodyReadError(f"request body stream failed: {e!r}") from e
    return bytes(buf)


def decode_body(raw: bytes, policy: BodyTextPolicy = BodyTextPolicy.REPLACE) -> str:
    if policy is BodyTextPolicy.STRICT:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise BodyReadError(f"request body is not valid UTF-8: {e}") from e
    return raw.decode("utf-8", errors="replace")


class DocumentGateway:
    """
    Stores each request body under a key derived from its path, then reads it back.

    Every step either advances to the next one or ends in Failed; nothing is
    retried and a failed read-back does not undo the write.
    """

    def __init__(self, store: AsyncDocumentStoreClient, settings: Settings):
        self._store = store
        self._settings = settings

    def _upsert_options(self) -> UpsertOptions | None:
        seconds = self._settings.document_expiry_seconds
        if not seconds:
            return None
        return UpsertOptions(expires_in_ns=seconds * 1_000_000_000)

    async def handle(self, path: str | None, body: AsyncGenerator[bytes, None]) -> Outcome:
        key = document_key_from_path(path, self._settings.default_document_key)

        try:
            text = decode_body(await read_body(body), self._settings.body_text_policy)
        except BodyReadError as e:
            logger.warning("DOCUMENT %s: body read failed: %s", key, e)
            return Failed(key, FailureKind.BODY_READ)

        try:
            await self._store.upsert(key, RawDocument(value=text), self._upsert_options())
        except StoreError as e:
            logger.warning("DOCUMENT %s: upsert failed: %r", key, e)
            return Failed(key, FailureKind.UPSERT)
        except Exception:
            logger.exception("DOCUMENT %s: unexpected upsert error", key)
            return Failed(key, FailureKind.UPSERT)

        try:
            result = await self._store.get(key, None)
        except StoreError as e:
            logger.warning("DOCUMENT %s: get failed: %r", key, e)
            return Failed(key, FailureKind.GET)
        except Exception:
            logger.exception("DOCUMENT %s: unexpected get error", key)
            return Failed(key, FailureKind.GET)

        document = getattr(result, "document", None)
        if not isinstance(document, RawDocument):
            logger.warning("DOCUMENT %s: expected a raw document, got %r", key, type(document).__name__)
            return Failed(key, FailureKind.DECODE)

        return Succeeded(key, document.value.encode("utf-8"))


def build_response(outcome: Outcome, settings: Settings) -> Response:
    if isinstance(outcome, Succeeded):
        return Response(
            content=outcome.value,
            status_code=settings.success_status_code,
            media_type=settings.response_media_type,
        )
    return PlainTextResponse(outcome.kind.message, status_code=FAILURE_STATUS_CODE)
