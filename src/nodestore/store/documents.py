from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Callable, Sequence, TypeVar

from nodestore.exceptions import ContentEncodingError, StoreIOError
from nodestore.store.identity import next_node_id, node_filename, scan_node_filenames
from nodestore.store.paths import append_normal

logger = logging.getLogger(__name__)

T = TypeVar("T")


def split_nodes(nodes: str | Sequence[str]) -> list[str]:
    """Accept ``"2,0,1"`` or ``["2", "0", "1"]``."""
    if isinstance(nodes, str):
        return nodes.split(",")
    return list(nodes)


def _decode(data: bytes, path: Path) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ContentEncodingError(f"{path.name}: {exc}") from exc


def _encode(body: str) -> bytes:
    try:
        return body.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ContentEncodingError(str(exc)) from exc


def _list_entries(document_path: Path) -> list[Path]:
    return [document_path / name for name in os.listdir(document_path)]


def _create_exclusive(path: Path, data: bytes) -> None:
    with open(path, "xb") as fh:
        fh.write(data)
        fh.flush()


class DocumentStore:
    """
    Documents are directories directly under ``library``; nodes are
    ``<name>.html`` files inside them.

    Every untrusted segment goes through :func:`append_normal` before any
    filesystem call is made. Blocking calls run in a worker thread. There is
    no locking: concurrent writers only get the per-call atomicity of the
    filesystem.
    """

    def __init__(self, library: Path | str) -> None:
        self.library = Path(library)

    def document_path(self, document: str) -> Path:
        return append_normal(self.library, document)

    def node_path(self, document: str, node: str) -> Path:
        doc_path = self.document_path(document)
        append_normal(doc_path, node)
        return append_normal(doc_path, node_filename(node))

    async def _run(self, path: Path, func: Callable[..., T], *args) -> T:
        try:
            return await asyncio.to_thread(func, *args)
        except OSError as exc:
            raise StoreIOError.from_os_error(exc, path) from exc

    async def _read_text(self, path: Path) -> str:
        data = await self._run(path, path.read_bytes)
        return _decode(data, path)

    async def read_document(
        self, document: str, nodes: str | Sequence[str] | None = None
    ) -> str:
        """
        Render a document by concatenating node contents with no separator.

        With ``nodes`` the named nodes are read in the given order. Without it
        every directory entry is read in lexicographic path order, so
        ``10.html`` comes before ``2.html``.
        """
        doc_path = self.document_path(document)
        if nodes is not None:
            paths = [self.node_path(document, node) for node in split_nodes(nodes)]
        else:
            entries = await self._run(doc_path, _list_entries, doc_path)
            paths = sorted(entries, key=os.fspath)

        logger.debug("Rendering %s from %d node(s)", doc_path, len(paths))
        parts = [await self._read_text(path) for path in paths]
        return "".join(parts)

    async def append_node(self, document: str, body: str) -> int:
        """Create the next numbered node. Returns its identity.

        A writer that loses the race for an identity gets NodeExistsError;
        it is not retried with a fresh one.
        """
        doc_path = self.document_path(document)
        data = _encode(body)
        filenames = await self._run(doc_path, scan_node_filenames, doc_path)
        node_id = next_node_id(filenames)
        path = append_normal(doc_path, node_filename(str(node_id)))
        await self._run(path, _create_exclusive, path, data)
        logger.info("Appended node %d to %s (%d bytes)", node_id, doc_path, len(data))
        return node_id

    async def read_node(self, document: str, node: str) -> str:
        path = self.node_path(document, node)
        logger.debug("Reading node %s", path)
        return await self._read_text(path)

    async def replace_node(self, document: str, node: str, body: str) -> None:
        path = self.node_path(document, node)
        data = _encode(body)
        await self._run(path, path.write_bytes, data)
        logger.info("Replaced node %s (%d bytes)", path, len(data))

    async def delete_node(self, document: str, node: str) -> None:
        path = self.node_path(document, node)
        await self._run(path, path.unlink)
        logger.info("Deleted node %s", path)
