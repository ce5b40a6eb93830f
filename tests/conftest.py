"""Shared fixtures for docvec tests.

Nothing here talks to a real Ollama or PostgreSQL: HTTP responses are built
as `requests.Response` objects and the SQLAlchemy engine is a MagicMock.
"""

import json
from datetime import datetime, timezone
from typing import List, Optional, Sequence
from unittest.mock import MagicMock

import pytest
import requests

from docvec.embeddings.base import Embedder
from docvec.vectordb.base import Document, DocumentStore, SearchHit, SearchResults

CREATED_AT = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


def make_response(status: int = 200, body=None, text: Optional[str] = None) -> requests.Response:
    """Build a real requests.Response with the given status and body."""
    r = requests.Response()
    r.status_code = status
    if body is not None:
        text = json.dumps(body)
    r._content = (text or "").encode("utf-8")
    r.encoding = "utf-8"
    return r


class FakeEmbedder(Embedder):
    """Returns a fixed vector, or raises `error` if set."""

    def __init__(self, vector: Sequence[float] = (0.1, 0.2, 0.3), error: Optional[Exception] = None):
        self.vector = list(vector)
        self.error = error
        self.calls: List[str] = []

    def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return list(self.vector)


class FakeStore(DocumentStore):
    """In-memory store that assigns sequential ids and returns preset hits."""

    def __init__(self, hits: Optional[List[SearchHit]] = None, skipped: int = 0, error: Optional[Exception] = None):
        self.inserted: List[Document] = []
        self.searches: List[tuple] = []
        self.hits = hits or []
        self.skipped = skipped
        self.error = error

    def insert(self, document: Document):
        if self.error is not None:
            raise self.error
        document.id = len(self.inserted) + 1
        document.created_at = CREATED_AT
        self.inserted.append(document)
        return document.id, document.created_at

    def search_similar(self, query_vector, limit):
        if self.error is not None:
            raise self.error
        self.searches.append((list(query_vector), limit))
        return SearchResults(hits=list(self.hits[:limit]), skipped=self.skipped)

    def stats(self):
        return {"documents": len(self.inserted)}


def make_hit(doc_id: int, similarity: float, content: str = "doc", file_name: Optional[str] = None) -> SearchHit:
    return SearchHit(
        document=Document(
            id=doc_id,
            content=content,
            file_name=file_name,
            embedding=[0.1, 0.2, 0.3],
            created_at=CREATED_AT,
        ),
        similarity=similarity,
    )


@pytest.fixture
def engine():
    """MagicMock SQLAlchemy engine; `engine.conn` is the connection for both begin() and connect()."""
    eng = MagicMock()
    conn = MagicMock()
    eng.begin.return_value.__enter__.return_value = conn
    eng.connect.return_value.__enter__.return_value = conn
    eng.conn = conn
    return eng
