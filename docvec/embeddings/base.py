# docvec/embeddings/base.py
"""Embedding interfaces."""

from __future__ import annotations

from typing import List


class Embedder:
    """
    Embedder interface for turning text into a vector.
    """

    def embed(self, text: str) -> List[float]:
        """
        Return the embedding for one input text.

        Args:
            text: Input string.

        Returns:
            Embedding vector.

        Raises:
            NotImplementedError: If not implemented.
        """
        raise NotImplementedError
