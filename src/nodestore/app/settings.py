from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from nodestore.exceptions import ConfigError

logger = logging.getLogger(__name__)

ErrorStyle = Literal["flat", "problem"]


class LibrarySettings(BaseSettings):
    # LIBRARY is read unprefixed; everything else takes NODESTORE_*
    library: str | None = Field(
        default=None,
        validation_alias=AliasChoices("LIBRARY", "NODESTORE_LIBRARY"),
    )
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=0, le=65535)
    error_style: ErrorStyle = "flat"
    cors_origins: list[str] | None = None

    model_config = SettingsConfigDict(
        env_prefix="NODESTORE_",
        env_file=".env",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )


def resolve_library(raw: str | os.PathLike[str] | None = None) -> Path:
    """
    Canonicalize the library root once.

    Falls back to ``$PWD`` and then the working directory when ``raw`` is unset,
    and to ``"."`` when the path cannot be resolved.
    """
    candidate = raw or os.getenv("PWD") or os.getcwd()
    try:
        return Path(candidate).resolve(strict=True)
    except OSError as exc:
        logger.warning("Cannot canonicalize library %r (%s); falling back to '.'", str(candidate), exc)
        return Path(".")


@lru_cache
def get_library_settings(**kwargs) -> LibrarySettings:
    # Only include kwargs that are not None, so env and defaults still apply
    filtered_kwargs = {k: v for k, v in kwargs.items() if v is not None}
    try:
        return LibrarySettings(**filtered_kwargs)
    except ValidationError as exc:
        raise ConfigError(f"invalid nodestore settings: {exc}") from exc
