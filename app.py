from __future__ import annotations

import logging

from fastapi import FastAPI

from dotenv import load_dotenv

from endpoints.document_endpoints import register_document_route
from endpoints.document_handler import DocumentGateway
from persistence.interfaces import AsyncDocumentStoreClient
from persistence.repositories import AsyncDocumentStore, build_document_store
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(store: AsyncDocumentStoreClient | None = None, settings: Settings | None = None) -> FastAPI:
    load_dotenv("local.env")

    if settings is None:
        settings = get_settings()
    if store is None:
        store = AsyncDocumentStore(build_document_store(settings))

    gateway = DocumentGateway(store, settings)

    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    app.state.gateway = gateway
    register_document_route(app, gateway, settings)

    logger.info("Document gateway ready (default key %r)", settings.default_document_key)
    return app


app = create_app()
