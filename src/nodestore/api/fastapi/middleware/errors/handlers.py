from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from nodestore.exceptions import (
    ContentEncodingError,
    NodeExistsError,
    NodeIdExhaustedError,
    NodeStoreError,
    NotFoundError,
    PathValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first; used only by the "problem" style.
PROBLEM_STATUS: tuple[tuple[type[NodeStoreError], int], ...] = (
    (PathValidationError, 400),
    (NotFoundError, 404),
    (NodeExistsError, 409),
    (NodeIdExhaustedError, 409),
    (ContentEncodingError, 422),
)


def status_for(exc: NodeStoreError) -> int:
    for kind, status in PROBLEM_STATUS:
        if isinstance(exc, kind):
            return status
    return 500


def problem_response(
    *,
    status: int,
    detail: str,
    code: str,
    title: str | None = None,
    instance: str | None = None,
) -> JSONResponse:
    body: dict[str, object] = {
        "type": "about:blank",
        "title": title or HTTPStatus(status).phrase,
        "status": status,
        "detail": detail,
        "code": code,
        # flat clients only look at "message"
        "message": detail,
    }
    if instance:
        body["instance"] = instance
    return JSONResponse(status_code=status, content=body, media_type="application/problem+json")


def flat_response(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"message": message})


def register_error_handlers(app: FastAPI, style: str = "flat") -> None:
    """
    Map NodeStoreError to a response.

    ``flat`` answers 500 with ``{"message": ...}`` for every failure kind.
    ``problem`` picks a status per kind and returns Problem+JSON.
    """
    if style not in ("flat", "problem"):
        raise ValueError(f"unknown error style: {style!r}")

    @app.exception_handler(NodeStoreError)
    async def _handle_store_error(request: Request, exc: NodeStoreError):
        status = 500 if style == "flat" else status_for(exc)
        logger.warning(
            "%s on %s %s (%d): %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            status,
            exc,
            extra={"http_method": request.method, "path": request.url.path, "status_code": status},
        )
        if style == "flat":
            return flat_response(str(exc))
        return problem_response(
            status=status,
            detail=str(exc),
            code=exc.code,
            instance=request.url.path,
        )
