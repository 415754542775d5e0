from nodestore.app.core.env import Env, get_env, get_env_flags, pick
from nodestore.app.core.logging import setup_logging
from nodestore.app.settings import LibrarySettings, get_library_settings, resolve_library

__all__ = [
    "Env",
    "get_env",
    "get_env_flags",
    "pick",
    "setup_logging",
    "LibrarySettings",
    "get_library_settings",
    "resolve_library",
]
