from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from nodestore.api.fastapi.middleware.errors.catchall import CatchAllExceptionMiddleware
from nodestore.api.fastapi.middleware.errors.handlers import register_error_handlers
from nodestore.api.fastapi.routers import documents
from nodestore.api.fastapi.settings import ApiConfig
from nodestore.app.core.env import get_env
from nodestore.app.settings import LibrarySettings, get_library_settings, resolve_library
from nodestore.store import DocumentStore

logger = logging.getLogger(__name__)

CLIENT_DIR = Path(__file__).resolve().parents[2] / "client"


def create_app(
        settings: LibrarySettings | None = None,
        api_config: ApiConfig | None = None,
        *,
        store: DocumentStore | None = None,
) -> FastAPI:
    """
    Build the HTTP app around one DocumentStore.

    The library root is resolved here, once, and shared read-only by every
    request through ``app.state.store``.
    """
    settings = settings or get_library_settings()
    api_config = api_config or ApiConfig()
    store = store or DocumentStore(resolve_library(settings.library))

    app = FastAPI(title=api_config.title, version=api_config.version)
    app.state.settings = settings
    app.state.store = store

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_middleware(CatchAllExceptionMiddleware)
    register_error_handlers(app, style=settings.error_style)

    # Mounted before the document routes so /client/<file> is not read as a node
    if api_config.mount_client:
        app.mount(api_config.client_path, StaticFiles(directory=CLIENT_DIR, html=True), name="client")

        client_index = api_config.client_path.rstrip("/") + "/"

        # the mount only matches "<client_path>/..."; the bare path would hit /{document}
        @app.get(api_config.client_path, include_in_schema=False)
        async def client_root():
            return RedirectResponse(url=client_index)

    app.include_router(documents.router, tags=[documents.ROUTER_TAG])

    logger.info(f"Serving {store.library} [env: {get_env()}, errors: {settings.error_style}]")
    return app


__all__ = ["create_app", "ApiConfig", "CLIENT_DIR"]
