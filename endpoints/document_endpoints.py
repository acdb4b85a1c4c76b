from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from endpoints.document_handler import DocumentGateway, Failed, build_response
from settings import Settings

logger = logging.getLogger(__name__)

DOCUMENT_ROUTE_PATH = "/{document_path:path}"


class DocumentEndpoint:
    """
    Raw ASGI endpoint for the catch-all document route.

    Starlette only applies a method filter to function endpoints, so mounting
    this callable with methods=None lets every verb, custom ones included,
    reach the gateway.
    """

    def __init__(self, gateway: DocumentGateway, settings: Settings):
        self._gateway = gateway
        self._settings = settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        # path params are matched against the decoded path, so %3F / %23 stay in the key
        path = "/" + request.path_params.get("document_path", "")

        outcome = await self._gateway.handle(path, request.stream())
        if self._settings.debug_log_requests:
            status = outcome.kind.value if isinstance(outcome, Failed) else "ok"
            logger.info("DOCUMENT REQUEST: %s %s -> key=%r %s", request.method, path, outcome.key, status)

        response = build_response(outcome, self._settings)
        await response(scope, receive, send)


def document_route(gateway: DocumentGateway, settings: Settings) -> Route:
    return Route(DOCUMENT_ROUTE_PATH, endpoint=DocumentEndpoint(gateway, settings), methods=None, include_in_schema=False)


def register_document_route(app: FastAPI, gateway: DocumentGateway, settings: Settings) -> None:
    app.router.routes.append(document_route(gateway, settings))
