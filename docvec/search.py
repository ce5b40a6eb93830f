# docvec/search.py
"""Similarity search orchestration.

Ingestion: text -> embedder -> store.insert
Query:     text -> embedder -> store.search_similar (or a vector directly)

Each call is independent; errors from the embedder or the store propagate
unchanged. If embedding fails nothing is written.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy import create_engine

from .config import Settings
from .embeddings.base import Embedder
from .embeddings.ollama import OllamaEmbedder
from .vectordb.base import Document, DocumentStore, SearchResults
from .vectordb.pgvector import PgVectorDocumentStore

logger = logging.getLogger(__name__)


class SimilaritySearch:
    """Ties an embedder to a document store."""

    def __init__(self, embedder: Embedder, store: DocumentStore) -> None:
        self.embedder = embedder
        self.store = store

    @classmethod
    def from_settings(cls, settings: Settings) -> "SimilaritySearch":
        """Build the Ollama embedder and pgvector store described by `settings`."""
        engine = create_engine(settings.database_url, pool_pre_ping=True)
        return cls(
            embedder=OllamaEmbedder.from_options(settings.embedding),
            store=PgVectorDocumentStore(engine, settings.store),
        )

    def ingest_document(
        self,
        content: str,
        media_type: Optional[str] = None,
        file_name: Optional[str] = None,
    ) -> Document:
        """
        Embed `content` and persist it.

        Returns:
            The stored document with id and created_at set.
        """
        embedding = self.embedder.embed(content)
        doc = Document(content=content, media_type=media_type, file_name=file_name, embedding=embedding)
        self.store.insert(doc)
        logger.info("Ingested document id=%s (%d dims)", doc.id, len(embedding))
        return doc

    def query_by_text(self, text: str, limit: int) -> SearchResults:
        """Embed `text` and return the `limit` nearest documents."""
        embedding = self.embedder.embed(text)
        return self.store.search_similar(embedding, limit)

    def query_by_vector(self, vector: Sequence[float], limit: int) -> SearchResults:
        """Return the `limit` nearest documents to an existing vector."""
        return self.store.search_similar(vector, limit)
