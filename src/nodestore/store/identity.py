"""Node naming and integer identity allocation.

New nodes get ``1 + max(existing numeric ids)``. This is a scan of the document
directory, not a counter, so gaps left by deleted nodes and hand-named nodes
(``intro.html``) are both fine. The scan is not synchronized with other
writers; the exclusive create in :mod:`nodestore.store.documents` decides who
wins a contested identity.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterable

from nodestore.exceptions import NodeIdExhaustedError

NODE_SUFFIX = ".html"
MAX_NODE_ID = 2**32 - 1

_NODE_ID_RE = re.compile(r"\+?[0-9]+")


def node_filename(name: str) -> str:
    return f"{name}{NODE_SUFFIX}"


def node_stem(filename: str) -> str:
    if filename.endswith(NODE_SUFFIX):
        return filename[: -len(NODE_SUFFIX)]
    return filename


def parse_node_id(filename: str) -> int | None:
    """Numeric identity of a node file, or None for hand-named entries."""
    stem = node_stem(filename)
    if not _NODE_ID_RE.fullmatch(stem):
        return None
    value = int(stem)
    if value > MAX_NODE_ID:
        return None
    return value


def next_node_id(filenames: Iterable[str]) -> int:
    highest: int | None = None
    for name in filenames:
        value = parse_node_id(name)
        if value is not None and (highest is None or value > highest):
            highest = value
    if highest is None:
        return 0
    if highest >= MAX_NODE_ID:
        raise NodeIdExhaustedError(f"no node identity left after {highest}")
    return highest + 1


def scan_node_filenames(document_path: Path) -> list[str]:
    # Blocking; callers run it off the event loop.
    with os.scandir(document_path) as entries:
        return [entry.name for entry in entries if entry.is_file(follow_symlinks=False)]
