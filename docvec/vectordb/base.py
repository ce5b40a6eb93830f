"""Document store interfaces.

A document store is responsible for:
  - Persisting a document (text + labels) together with its embedding
  - Returning stored documents ranked by vector distance to a query embedding
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Tuple


@dataclass
class Document:
    """
    A stored text document.

    Attributes:
        content: Document text.
        media_type: Optional media type label (e.g. text/markdown).
        file_name: Optional file name label.
        embedding: Embedding vector.
        id: Identifier assigned by the store on insert.
        created_at: Creation timestamp assigned by the store on insert.
    """

    content: str
    media_type: Optional[str] = None
    file_name: Optional[str] = None
    embedding: List[float] = field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Serialize for JSON output (the embedding itself is left out)."""
        return {
            "id": self.id,
            "content": self.content,
            "media_type": self.media_type,
            "file_name": self.file_name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "dimensions": len(self.embedding),
        }


@dataclass
class SearchHit:
    """A retrieved document with its similarity score (higher is closer)."""

    document: Document
    similarity: float


@dataclass
class SearchResults:
    """Ranked hits plus the number of rows that could not be read."""

    hits: List[SearchHit] = field(default_factory=list)
    skipped: int = 0

    def __len__(self) -> int:
        return len(self.hits)

    def __iter__(self):
        return iter(self.hits)


class DocumentStore:
    """Document store interface."""

    def insert(self, document: Document) -> Tuple[int, datetime]:
        """Persist a document and its embedding.

        On success the store-assigned id and timestamp are written back onto
        `document`.

        Returns:
            (id, created_at)
        """
        raise NotImplementedError

    def search_similar(self, query_vector: Sequence[float], limit: int) -> SearchResults:
        """Return at most `limit` documents ordered by ascending distance."""
        raise NotImplementedError

    def stats(self) -> dict:
        """Return basic stats about the store."""
        raise NotImplementedError
