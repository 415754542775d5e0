from . import api, app, store

from .exceptions import (
    ConfigError,
    ContentEncodingError,
    NodeExistsError,
    NodeIdExhaustedError,
    NodeStoreError,
    NotFoundError,
    PathValidationError,
    StoreIOError,
)
from .store import DocumentStore

__version__ = "0.1.0"

__all__ = [
    "api",
    "app",
    "store",
    "DocumentStore",
    "NodeStoreError",
    "PathValidationError",
    "StoreIOError",
    "NotFoundError",
    "NodeExistsError",
    "ContentEncodingError",
    "NodeIdExhaustedError",
    "ConfigError",
]
