from __future__ import annotations

import os
import re
from enum import Enum
from pathlib import Path, PurePath
from typing import NamedTuple

from nodestore.exceptions import PathValidationError

_SEPARATORS = os.sep + (os.altsep or "")
_SPLIT_RE = re.compile("[" + re.escape(_SEPARATORS) + "]")


class Component(Enum):
    NORMAL = "Normal"
    CUR_DIR = "CurDir"
    PARENT_DIR = "ParentDir"
    ROOT = "RootDir"
    PREFIX = "Prefix"


class PathPart(NamedTuple):
    kind: Component
    text: str


def first_component(raw: str) -> PathPart | None:
    """
    Classify the first structural component of ``raw`` as a path.

    Returns None when the string yields no component at all.
    """
    if not raw:
        return None
    drive = PurePath(raw).drive
    if drive:
        return PathPart(Component.PREFIX, drive)
    if raw[0] in _SEPARATORS:
        return PathPart(Component.ROOT, raw[0])
    head = _SPLIT_RE.split(raw, maxsplit=1)[0]
    if head == ".":
        return PathPart(Component.CUR_DIR, head)
    if head == "..":
        return PathPart(Component.PARENT_DIR, head)
    return PathPart(Component.NORMAL, head)


def append_normal(base: Path, raw: str) -> Path:
    """
    Return ``base / raw`` if ``raw`` is exactly one normal path component.

    Rejects ``.``, ``..``, rooted or drive-prefixed strings, the empty string,
    and any string carrying a separator. Lexical only: nothing is read from disk.
    """
    part = first_component(raw)
    if part is None:
        raise PathValidationError("empty path segment", segment=raw)
    if part.kind is not Component.NORMAL:
        raise PathValidationError(
            f"`{raw}` contains invalid component `{part.kind.value}`", segment=raw
        )
    if part.text != raw:
        rest = raw[len(part.text):]
        raise PathValidationError(
            f"`{raw}` contains invalid component `{rest}`", segment=raw
        )
    if "\x00" in raw:
        raise PathValidationError(f"`{raw!r}` contains a NUL character", segment=raw)
    return base / raw
