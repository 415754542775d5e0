"""Error taxonomy for nodestore.

Every failure raised below the HTTP layer derives from :class:`NodeStoreError`.
The subclasses keep validation, I/O and encoding failures apart so callers can
tell them apart even when the HTTP adapter flattens them to a single status.
"""

from __future__ import annotations

from pathlib import Path


class NodeStoreError(Exception):
    """Base exception for all nodestore errors."""

    code: str = "NODESTORE_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class PathValidationError(NodeStoreError):
    """An untrusted path segment is not a single normal component."""

    code = "INVALID_PATH"

    def __init__(self, message: str, *, segment: str | None = None) -> None:
        super().__init__(message)
        self.segment = segment


class StoreIOError(NodeStoreError):
    """A filesystem call failed."""

    code = "IO_ERROR"

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        errno: int | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.errno = errno

    @classmethod
    def from_os_error(cls, exc: OSError, path: Path | None = None) -> StoreIOError:
        if isinstance(exc, FileNotFoundError):
            kind: type[StoreIOError] = NotFoundError
        elif isinstance(exc, FileExistsError):
            kind = NodeExistsError
        else:
            kind = cls
        strerror = exc.strerror or str(exc)
        message = f"{strerror} (os error {exc.errno})" if exc.errno is not None else strerror
        return kind(message, path=path, errno=exc.errno)


class NotFoundError(StoreIOError):
    """The document directory or node file does not exist."""

    code = "NOT_FOUND"


class NodeExistsError(StoreIOError):
    """An exclusive create found the node file already present."""

    code = "NODE_EXISTS"


class ContentEncodingError(NodeStoreError):
    """Stored or submitted content is not valid UTF-8."""

    code = "INVALID_ENCODING"


class NodeIdExhaustedError(NodeStoreError):
    """No unused 32-bit node identity is left in a document."""

    code = "NODE_ID_EXHAUSTED"


class ConfigError(NodeStoreError):
    """A configuration value from the environment is missing or invalid."""

    code = "CONFIG_ERROR"


__all__ = [
    "NodeStoreError",
    "PathValidationError",
    "StoreIOError",
    "NotFoundError",
    "NodeExistsError",
    "ContentEncodingError",
    "NodeIdExhaustedError",
    "ConfigError",
]
