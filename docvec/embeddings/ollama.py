# docvec/embeddings/ollama.py
"""
Ollama embedding backend.

This embedder calls the Ollama HTTP API to produce one embedding per call:
  - POST {host}/api/embeddings with {"model": "...", "prompt": "..."}
  - Response: {"embedding": [...]}

Failures are classified and raised immediately; there is no retry here:
  - transport failure       -> EmbeddingUnavailable
  - non-200 status          -> EmbeddingServiceError(status)
  - unusable response body  -> EmbeddingParseError
"""

from __future__ import annotations

import json
import logging
import math
import numbers
from typing import Any, List

import requests

from ..config import DEFAULT_EMBED_MODEL, EmbeddingOptions
from ..errors import (
    EmbeddingParseError,
    EmbeddingServiceError,
    EmbeddingUnavailable,
    RequestPreparationError,
)
from .base import Embedder

logger = logging.getLogger(__name__)

_LOG_BODY_CHARS = 500


class OllamaEmbedder(Embedder):
    """
    Compute embeddings via Ollama's /api/embeddings endpoint.

    Attributes:
        host: Ollama base URL, already resolved (see docvec.config.resolve_ollama_url).
        model: Embedding model name.
        timeout: HTTP timeout seconds.
    """

    def __init__(self, host: str, model: str = DEFAULT_EMBED_MODEL, timeout: float = 60.0):
        self.host = host.rstrip("/")
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_options(cls, options: EmbeddingOptions) -> "OllamaEmbedder":
        return cls(host=options.ollama_url, model=options.model, timeout=options.timeout)

    @property
    def endpoint(self) -> str:
        return f"{self.host}/api/embeddings"

    def _prepare_body(self, text: str) -> str:
        if not isinstance(text, str):
            raise RequestPreparationError(f"prompt must be a string, got {type(text).__name__}")
        try:
            return json.dumps({"model": self.model, "prompt": text})
        except (TypeError, ValueError) as e:
            raise RequestPreparationError(f"failed to prepare embedding request: {e}") from e

    @staticmethod
    def _extract_embedding(data: Any) -> List[float]:
        """
        Extract the embedding array from Ollama response JSON.

        Args:
            data: Parsed JSON.

        Returns:
            Embedding as a list of floats.

        Raises:
            EmbeddingParseError: If the shape is not {"embedding": [number, ...]}.
        """
        if not isinstance(data, dict):
            raise EmbeddingParseError("embedding response is not a JSON object")
        emb = data.get("embedding")
        if not isinstance(emb, list):
            raise EmbeddingParseError("embedding response has no 'embedding' array")
        if not emb:
            raise EmbeddingParseError("embedding service returned an empty embedding vector")
        # bool is a numbers.Number too
        if not all(isinstance(x, numbers.Real) and not isinstance(x, bool) for x in emb):
            raise EmbeddingParseError("embedding array contains non-numeric values")
        try:
            out = [float(x) for x in emb]
        except OverflowError as e:
            raise EmbeddingParseError(f"embedding component out of float range: {e}") from e
        if not all(math.isfinite(v) for v in out):
            raise EmbeddingParseError("embedding array contains NaN or infinite values")
        return out

    def embed(self, text: str) -> List[float]:
        """
        Generate the embedding for one text.

        Args:
            text: Input string.

        Returns:
            Embedding vector.

        Raises:
            RequestPreparationError: If the request body cannot be built.
            EmbeddingUnavailable: If Ollama cannot be reached.
            EmbeddingServiceError: If Ollama returns a non-200 status.
            EmbeddingParseError: If the response body is malformed.
        """
        body = self._prepare_body(text)
        logger.debug("Sending embedding request to %s (model=%s, prompt_length=%d)", self.endpoint, self.model, len(text))

        try:
            r = requests.post(
                self.endpoint,
                data=body.encode("utf-8"),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Ollama connection error: %s", e)
            raise EmbeddingUnavailable(f"failed to connect to embedding service at {self.host}: {e}") from e

        logger.debug("Ollama response: status=%d, body=%s", r.status_code, r.text[:_LOG_BODY_CHARS])

        if r.status_code != 200:
            logger.error("Ollama returned non-200 status: %d", r.status_code)
            raise EmbeddingServiceError(r.status_code, r.text[:_LOG_BODY_CHARS])

        try:
            data = r.json()
        except ValueError as e:
            logger.error("Failed to parse Ollama response: %s", e)
            raise EmbeddingParseError(f"failed to parse embedding response: {e}") from e

        return self._extract_embedding(data)
