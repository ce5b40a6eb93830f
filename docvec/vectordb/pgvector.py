"""PostgreSQL + pgvector document store.

Storage:
  - One row per document: text, optional labels, `vector(n)` embedding,
    store-assigned id and timestamp.

Retrieval:
  - Distance ordering is done by PostgreSQL with the pgvector operator for the
    configured metric; similarity is reported as ``1 - distance``.
  - Connection pooling and transactions are SQLAlchemy's.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Optional, Sequence, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..config import StoreOptions
from ..errors import DecodeError, DimensionMismatchError, PersistenceError
from .base import Document, DocumentStore, SearchHit, SearchResults
from .codec import check_dimensions, decode_vector, encode_vector

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# HNSW operator class per metric
_INDEX_OPCLASS = {
    "cosine": "vector_cosine_ops",
    "l2": "vector_l2_ops",
    "inner_product": "vector_ip_ops",
}


class PgVectorDocumentStore(DocumentStore):
    """Document store backed by a PostgreSQL table with a pgvector column."""

    def __init__(self, engine: Engine, options: Optional[StoreOptions] = None) -> None:
        self.engine = engine
        self.options = options or StoreOptions()
        if not _IDENTIFIER.match(self.options.table):
            raise ValueError(f"Invalid table name: {self.options.table!r}")

        table = self.options.table
        op = self.options.operator
        self._insert_sql = text(
            f"INSERT INTO {table} (content, media_type, file_name, embedding) "
            f"VALUES (:content, :media_type, :file_name, CAST(:embedding AS vector)) "
            f"RETURNING id, created_at"
        )
        self._search_sql = text(
            f"""
            SELECT id, content, media_type, file_name, CAST(embedding AS text),
                   created_at, 1 - (embedding {op} CAST(:query AS vector)) AS similarity
            FROM {table}
            ORDER BY embedding {op} CAST(:query AS vector)
            LIMIT :limit
            """
        )

    def ensure_schema(self) -> None:
        """Create the pgvector extension, documents table and HNSW index if missing."""
        table = self.options.table
        dim = f"({self.options.dimensions})" if self.options.dimensions else ""
        opclass = _INDEX_OPCLASS[self.options.distance]
        statements = [
            "CREATE EXTENSION IF NOT EXISTS vector",
            f"""
            CREATE TABLE IF NOT EXISTS {table} (
                id BIGSERIAL PRIMARY KEY,
                content TEXT NOT NULL,
                media_type TEXT,
                file_name TEXT,
                embedding vector{dim} NOT NULL,
                created_at TIMESTAMPTZ NOT NULL DEFAULT now()
            )
            """,
        ]
        # HNSW needs a fixed dimensionality
        if self.options.dimensions:
            statements.append(
                f"CREATE INDEX IF NOT EXISTS idx_{table}_embedding ON {table} USING hnsw (embedding {opclass})"
            )
        try:
            with self.engine.begin() as conn:
                for stmt in statements:
                    conn.execute(text(stmt))
        except SQLAlchemyError as e:
            logger.error("Schema setup failed: %s", e)
            raise PersistenceError(f"failed to create schema: {e}") from e
        logger.info("Schema ready (table=%s, distance=%s)", table, self.options.distance)

    def insert(self, document: Document) -> Tuple[int, datetime]:
        check_dimensions(document.embedding, self.options.dimensions, "document")
        params = {
            "content": document.content,
            "media_type": document.media_type,
            "file_name": document.file_name,
            "embedding": encode_vector(document.embedding),
        }
        logger.debug(
            "Inserting document: content_length=%d, media_type=%s, file_name=%s, embedding_length=%d",
            len(document.content),
            document.media_type,
            document.file_name,
            len(document.embedding),
        )
        try:
            with self.engine.begin() as conn:
                row = conn.execute(self._insert_sql, params).one()
        except SQLAlchemyError as e:
            logger.error("Database error on insert: %s", e)
            raise PersistenceError(f"failed to save document: {e}") from e

        doc_id, created_at = row[0], row[1]
        document.id = doc_id
        document.created_at = created_at
        logger.info("Stored document id=%s", doc_id)
        return doc_id, created_at

    def search_similar(self, query_vector: Sequence[float], limit: int) -> SearchResults:
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")
        check_dimensions(query_vector, self.options.dimensions, "query")
        params = {"query": encode_vector(query_vector), "limit": int(limit)}

        logger.debug("Executing search with embedding length %d, limit %d", len(query_vector), limit)
        results = SearchResults()
        try:
            with self.engine.connect() as conn:
                for row in conn.execute(self._search_sql, params):
                    hit = self._row_to_hit(row)
                    if hit is None:
                        results.skipped += 1
                        continue
                    results.hits.append(hit)
        except SQLAlchemyError as e:
            logger.error("Search query error: %s", e)
            raise PersistenceError(f"failed to search documents: {e}") from e

        if results.skipped:
            logger.warning("Search skipped %d unreadable row(s)", results.skipped)
        return results

    def _row_to_hit(self, row) -> Optional[SearchHit]:
        """Build a hit from a result row, or None if the row is unreadable."""
        try:
            doc_id, content, media_type, file_name, emb_text, created_at, similarity = row
            embedding = decode_vector(emb_text)
            check_dimensions(embedding, self.options.dimensions, "stored")
            hit = SearchHit(
                document=Document(
                    id=int(doc_id),
                    content=content,
                    media_type=media_type,
                    file_name=file_name,
                    embedding=embedding,
                    created_at=created_at,
                ),
                similarity=float(similarity),
            )
        except (DecodeError, DimensionMismatchError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Row scan error: %s", e)
            return None
        logger.debug("Found document id=%s with similarity %.4f", hit.document.id, hit.similarity)
        return hit

    def count(self) -> int:
        try:
            with self.engine.connect() as conn:
                return int(conn.execute(text(f"SELECT COUNT(*) FROM {self.options.table}")).scalar_one())
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to count documents: {e}") from e

    def stats(self) -> dict:
        return {
            "documents": self.count(),
            "table": self.options.table,
            "distance": self.options.distance,
            "dimensions": self.options.dimensions,
        }
