"""docvec CLI.

Commands:
  - init-db: create the pgvector extension, documents table and index
  - ingest: embed and store inline text or text files
  - search: rank stored documents by similarity to a query
  - status: show Ollama reachability and store stats
  - serve: run the HTTP API

Ollama:
  - Embeddings endpoint: POST <ollama-url>/api/embeddings
  - URL resolution: --ollama-url, OLLAMA_URL, settings file,
    host.docker.internal when DOCKER_CONTAINER is set, else localhost
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from .cli_actions import configure_logging, do_ingest, do_init_db, do_search, do_status
from .config import Settings, load_settings, with_overrides

app = typer.Typer(add_completion=False, help="docvec: store documents with embeddings and search them by similarity.")


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj


@app.callback()
def main_options(
    ctx: typer.Context,
    database_url: Optional[str] = typer.Option(None, "--database-url", help="SQLAlchemy URL of the PostgreSQL database."),
    ollama_url: Optional[str] = typer.Option(None, "--ollama-url", help="Ollama base URL."),
    embed_model: Optional[str] = typer.Option(None, "--embed-model", help="Ollama embedding model name."),
    dimensions: Optional[int] = typer.Option(None, "--dimensions", help="Embedding dimensionality."),
    distance: Optional[str] = typer.Option(None, "--distance", help="cosine|l2|inner_product"),
    settings_file: Optional[Path] = typer.Option(None, "--settings", help="JSON settings file (default .docvec/settings.json)."),
    log_level: str = typer.Option("WARNING", "--log-level", help="DEBUG|INFO|WARNING|ERROR"),
):
    """Resolve settings once for every command."""
    try:
        configure_logging(log_level)
        settings = load_settings(settings_file=settings_file)
        ctx.obj = with_overrides(
            settings,
            database_url=database_url,
            ollama_url=ollama_url,
            embed_model=embed_model,
            dimensions=dimensions,
            distance=distance,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


@app.command("init-db")
def init_db(ctx: typer.Context):
    """Create the documents table (and pgvector extension) if missing."""
    do_init_db(_settings(ctx))


@app.command()
def ingest(
    ctx: typer.Context,
    text: Optional[str] = typer.Argument(None, help="Document text to ingest."),
    files: List[Path] = typer.Option([], "--file", "-f", help="Text file to ingest (repeatable)."),
    media_type: Optional[str] = typer.Option(None, "--media-type", help="Media type label."),
    file_name: Optional[str] = typer.Option(None, "--file-name", help="File name label for inline text."),
):
    """Embed documents and store them."""
    do_ingest(_settings(ctx), text=text, files=files, media_type=media_type, file_name=file_name)


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Query text."),
    limit: Optional[int] = typer.Option(None, "--limit", "-k", help="Maximum number of results."),
):
    """Find the stored documents most similar to QUERY."""
    settings = _settings(ctx)
    do_search(settings, query=query, limit=limit if limit is not None else settings.top_k)


@app.command()
def status(ctx: typer.Context):
    """Show Ollama reachability and store stats."""
    do_status(_settings(ctx))


@app.command()
def serve(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host", help="Host to bind."),
    port: int = typer.Option(8080, "--port", help="Port to bind."),
):
    """Start the docvec HTTP API."""
    import uvicorn
    from .server.api import create_app

    api = create_app(settings=_settings(ctx))
    uvicorn.run(api, host=host, port=port, log_level="info")


def main() -> None:
    """CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
