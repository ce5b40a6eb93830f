# docvec/cli_actions.py
"""
Reusable CLI actions.

The CLI (`docvec.cli`) parses options into a Settings object and calls these
functions. Core errors are printed and turned into exit code 1.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import requests
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import Settings
from .errors import DocvecError, EmbeddingUnavailable
from .ingest.loaders import load_text_file
from .ollama_client import check_ollama, has_model, list_models
from .search import SimilaritySearch
from .vectordb.pgvector import PgVectorDocumentStore

console = Console()

_SNIPPET_CHARS = 80


def configure_logging(level: str = "WARNING") -> None:
    """Route standard logging through rich.

    Raises:
        ValueError: If `level` is not a logging level name.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(
        level=numeric,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=False, show_path=False)],
        force=True,
    )


def _build_search(settings: Settings) -> SimilaritySearch:
    return SimilaritySearch.from_settings(settings)


def _fail(e: Exception) -> NoReturn:
    """Print a core error and exit with status 1."""
    console.print(f"[red]{type(e).__name__}:[/red] {e}")
    if isinstance(e, EmbeddingUnavailable):
        console.print("[yellow]Is Ollama running? Set OLLAMA_URL or pass --ollama-url.[/yellow]")
    raise typer.Exit(code=1)


def _snippet(content: str) -> str:
    flat = " ".join(content.split())
    return flat if len(flat) <= _SNIPPET_CHARS else flat[: _SNIPPET_CHARS - 3] + "..."


def do_init_db(settings: Settings) -> None:
    """
    Create the pgvector extension, documents table and index.

    Args:
        settings: Resolved settings.
    """
    search = _build_search(settings)
    store = search.store
    if not isinstance(store, PgVectorDocumentStore):
        raise typer.BadParameter("init-db needs a pgvector store")
    try:
        store.ensure_schema()
    except DocvecError as e:
        _fail(e)
    opts = store.options
    console.print(
        f"[bold green]Schema ready[/bold green] table={opts.table} dimensions={opts.dimensions} distance={opts.distance}"
    )


def do_ingest(
    settings: Settings,
    text: Optional[str],
    files: List[Path],
    media_type: Optional[str] = None,
    file_name: Optional[str] = None,
) -> None:
    """
    Ingest inline text and/or one document per file.

    Args:
        settings: Resolved settings.
        text: Inline document text (optional when files are given).
        files: Text files to ingest, one document each.
        media_type: Media type label for inline text (files use a guessed type).
        file_name: File name label for inline text.
    """
    if not text and not files:
        raise typer.BadParameter("Provide TEXT or at least one --file.")

    search = _build_search(settings)

    pending = []
    if text:
        pending.append((text, media_type, file_name))
    for path in files:
        try:
            loaded = load_text_file(path)
        except (OSError, ValueError) as e:
            console.print(f"[yellow]Skipping {path}:[/yellow] {e}")
            continue
        pending.append((loaded.content, media_type or loaded.media_type, loaded.file_name))

    table = Table(title="Ingested documents")
    table.add_column("id", justify="right")
    table.add_column("file")
    table.add_column("media type")
    table.add_column("created")

    for content, mt, fn in pending:
        try:
            doc = search.ingest_document(content, media_type=mt, file_name=fn)
        except DocvecError as e:
            if table.row_count:
                console.print(table)
            _fail(e)
        table.add_row(str(doc.id), fn or "-", mt or "-", str(doc.created_at))

    console.print(table)


def do_search(settings: Settings, query: str, limit: int) -> None:
    """
    Print the documents most similar to `query`.

    Args:
        settings: Resolved settings.
        query: Query text.
        limit: Maximum number of results.
    """
    if limit <= 0:
        raise typer.BadParameter("--limit must be positive")

    search = _build_search(settings)
    try:
        results = search.query_by_text(query, limit)
    except DocvecError as e:
        _fail(e)

    table = Table(title=f"Top {limit} for: {_snippet(query)}")
    table.add_column("#", justify="right")
    table.add_column("id", justify="right")
    table.add_column("similarity", justify="right")
    table.add_column("file")
    table.add_column("content")
    for rank, hit in enumerate(results.hits, start=1):
        doc = hit.document
        table.add_row(str(rank), str(doc.id), f"{hit.similarity:.4f}", doc.file_name or "-", _snippet(doc.content))
    console.print(table)

    if results.skipped:
        console.print(f"[yellow]{results.skipped} unreadable row(s) skipped.[/yellow]")


def do_status(settings: Settings) -> None:
    """
    Show Ollama reachability, installed models and document count.

    Args:
        settings: Resolved settings.
    """
    host = settings.embedding.ollama_url
    model = settings.embedding.model
    reachable = check_ollama(host)
    console.print(f"Ollama: {host} ({'[green]reachable[/green]' if reachable else '[red]unreachable[/red]'})")
    if reachable:
        try:
            models = list_models(host)
        except requests.RequestException as e:
            console.print(f"[yellow]Could not list models:[/yellow] {e}")
        else:
            mark = "[green]installed[/green]" if has_model(models, model) else "[red]missing[/red]"
            console.print(f"Embedding model: {model} ({mark})")

    search = _build_search(settings)
    try:
        stats = search.store.stats()
    except DocvecError as e:
        _fail(e)
    for k, v in stats.items():
        console.print(f"- {k}: {v}")
