# docvec/server/api.py
"""
docvec HTTP API.

Endpoints:
  - GET  /health             liveness + Ollama reachability
  - POST /documents          embed and store one document
  - POST /documents/search   rank stored documents by text or vector query

Core errors map to HTTP status codes:
  - EmbeddingUnavailable                      -> 503
  - EmbeddingServiceError, EmbeddingParseError -> 502
  - RequestPreparationError, bad vectors/limit -> 400
  - PersistenceError                          -> 500
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from ..config import Settings, load_settings
from ..errors import (
    DocvecError,
    EmbeddingParseError,
    EmbeddingServiceError,
    EmbeddingUnavailable,
    PersistenceError,
)
from ..ollama_client import check_ollama
from ..search import SimilaritySearch

logger = logging.getLogger(__name__)


class DocumentIn(BaseModel):
    content: str
    media_type: Optional[str] = None
    file_name: Optional[str] = None


class SearchIn(BaseModel):
    query: Optional[str] = None
    embedding: Optional[List[float]] = None
    limit: Optional[int] = None


def _http_error(e: Exception) -> HTTPException:
    """Translate a core error into an HTTPException."""
    if isinstance(e, EmbeddingUnavailable):
        status = 503
    elif isinstance(e, (EmbeddingServiceError, EmbeddingParseError)):
        status = 502
    elif isinstance(e, PersistenceError):
        status = 500
    else:
        status = 400
    return HTTPException(status_code=status, detail=str(e))


def create_app(
    settings: Optional[Settings] = None,
    search: Optional[SimilaritySearch] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        settings: Resolved settings. Loaded from the environment if omitted.
        search: Prebuilt orchestrator. Built from `settings` if omitted.

    Returns:
        FastAPI application.
    """
    settings = settings or load_settings()
    search = search or SimilaritySearch.from_settings(settings)

    app = FastAPI(title="docvec", version="0.1.0")

    @app.get("/health")
    def health():
        return {"ok": True, "ollama": check_ollama(settings.embedding.ollama_url)}

    @app.post("/documents", status_code=201)
    def create_document(body: DocumentIn):
        try:
            doc = search.ingest_document(body.content, media_type=body.media_type, file_name=body.file_name)
        except DocvecError as e:
            logger.error("Ingest failed: %s", e)
            raise _http_error(e) from e
        return doc.to_dict()

    @app.post("/documents/search")
    def search_documents(body: SearchIn):
        if (body.query is None) == (body.embedding is None):
            raise HTTPException(status_code=400, detail="Provide exactly one of 'query' or 'embedding'.")
        limit = body.limit if body.limit is not None else settings.top_k
        if limit <= 0:
            raise HTTPException(status_code=400, detail="'limit' must be positive.")

        try:
            if body.query is not None:
                results = search.query_by_text(body.query, limit)
            else:
                results = search.query_by_vector(body.embedding, limit)
        except (DocvecError, ValueError) as e:
            logger.error("Search failed: %s", e)
            raise _http_error(e) from e

        return {
            "results": [dict(hit.document.to_dict(), similarity=hit.similarity) for hit in results.hits],
            "skipped": results.skipped,
        }

    return app
