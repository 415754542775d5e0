"""
Root conftest.py for nodestore tests.

Provides:
1. Environment isolation (no LIBRARY / NODESTORE_* leakage, fresh settings cache)
2. A temporary library root with an empty ``notes`` document
3. A DocumentStore and an async HTTP client bound to that library
"""

from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from nodestore.api.fastapi import create_app
from nodestore.app.core.env import get_env
from nodestore.app.settings import LibrarySettings, get_library_settings
from nodestore.store import DocumentStore


# =============================================================================
# ENVIRONMENT
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for name in (
        "LIBRARY",
        "NODESTORE_LIBRARY",
        "NODESTORE_HOST",
        "NODESTORE_PORT",
        "NODESTORE_ERROR_STYLE",
        "NODESTORE_CORS_ORIGINS",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NODESTORE_ENV", "test")
    # keep a stray .env in the repo root out of the settings
    monkeypatch.chdir(tmp_path)
    get_env.cache_clear()
    get_library_settings.cache_clear()
    yield
    get_env.cache_clear()
    get_library_settings.cache_clear()


# =============================================================================
# LIBRARY + STORE
# =============================================================================


@pytest.fixture
def library(tmp_path) -> Path:
    root = tmp_path / "library"
    (root / "notes").mkdir(parents=True)
    return root.resolve()


@pytest.fixture
def notes(library) -> Path:
    return library / "notes"


@pytest.fixture
def store(library) -> DocumentStore:
    return DocumentStore(library)


def write_nodes(document: Path, **nodes: str) -> None:
    for name, body in nodes.items():
        (document / f"{name}.html").write_text(body, encoding="utf-8")


@pytest.fixture
def make_nodes():
    return write_nodes


# =============================================================================
# HTTP
# =============================================================================


@pytest.fixture
def error_style() -> str:
    return "flat"


@pytest.fixture
def api_app(library, error_style) -> FastAPI:
    settings = LibrarySettings(library=str(library), error_style=error_style)
    return create_app(settings)


@pytest_asyncio.fixture
async def api_client(api_app: FastAPI) -> AsyncClient:
    transport = ASGITransport(app=api_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
