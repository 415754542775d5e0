from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from dotenv import find_dotenv, load_dotenv

from nodestore.app.core.logging import setup_logging
from nodestore.app.settings import get_library_settings, resolve_library
from nodestore.exceptions import NodeStoreError
from nodestore.store import DocumentStore

app = typer.Typer(no_args_is_help=True, add_completion=False, help="Serve and inspect a nodestore library.")


@app.callback()
def _load_env() -> None:
    # .env values reach every reader (logging, env flags), never overriding the real environment
    load_dotenv(find_dotenv(usecwd=True))


def _fail(exc: NodeStoreError) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command("serve")
def serve(
        library: Optional[Path] = typer.Option(None, help="Library root; defaults to $LIBRARY, then the working directory"),
        host: Optional[str] = typer.Option(None, help="Bind address (default 127.0.0.1)"),
        port: Optional[int] = typer.Option(None, help="Bind port (default 8080)"),
        error_style: Optional[str] = typer.Option(None, help="'flat' (500 + message) or 'problem' (status per error kind)"),
):
    """Run the HTTP service under uvicorn."""
    import uvicorn

    from nodestore.api.fastapi import create_app

    setup_logging()
    try:
        settings = get_library_settings(
            library=str(library) if library else None,
            host=host,
            port=port,
            error_style=error_style,
        )
    except NodeStoreError as exc:
        _fail(exc)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


@app.command("render")
def render(
        document: str = typer.Argument(..., help="Document name under the library root"),
        nodes: Optional[str] = typer.Option(None, help="Comma-separated node names, in render order"),
        library: Optional[Path] = typer.Option(None, help="Library root; defaults to $LIBRARY, then the working directory"),
):
    """Print a rendered document to stdout."""
    try:
        settings = get_library_settings(library=str(library) if library else None)
        store = DocumentStore(resolve_library(settings.library))
        rendered = asyncio.run(store.read_document(document, nodes))
    except NodeStoreError as exc:
        _fail(exc)
    typer.echo(rendered, nl=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
