from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import HTMLResponse

from nodestore.exceptions import ContentEncodingError
from nodestore.store import DocumentStore

ROUTER_TAG = "documents"

router = APIRouter()


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


StoreDep = Annotated[DocumentStore, Depends(get_store)]


async def read_text_body(request: Request) -> str:
    raw = await request.body()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ContentEncodingError(f"request body: {exc}") from exc


BodyDep = Annotated[str, Depends(read_text_body)]


@router.get("/{document}", response_class=HTMLResponse)
async def read_document(document: str, store: StoreDep, nodes: str | None = None):
    """Render a document; ``nodes=2,0,1`` picks nodes and their order."""
    return HTMLResponse(await store.read_document(document, nodes))


@router.post("/{document}", status_code=status.HTTP_200_OK)
async def append_node(document: str, body: BodyDep, store: StoreDep):
    await store.append_node(document, body)
    return Response(status_code=status.HTTP_200_OK)


@router.get("/{document}/{node}", response_class=HTMLResponse)
async def read_node(document: str, node: str, store: StoreDep):
    return HTMLResponse(await store.read_node(document, node))


@router.put("/{document}/{node}", status_code=status.HTTP_205_RESET_CONTENT)
async def replace_node(document: str, node: str, body: BodyDep, store: StoreDep):
    await store.replace_node(document, node, body)
    return Response(status_code=status.HTTP_205_RESET_CONTENT)


@router.delete("/{document}/{node}", status_code=status.HTTP_205_RESET_CONTENT)
async def delete_node(document: str, node: str, store: StoreDep):
    await store.delete_node(document, node)
    return Response(status_code=status.HTTP_205_RESET_CONTENT)
