# docvec/errors.py
"""Exception hierarchy.

Embedding and persistence failures are raised unchanged to the caller of
:class:`docvec.search.SimilaritySearch`; nothing in the package retries them.
"""

from __future__ import annotations

from typing import Optional


class DocvecError(Exception):
    """Base class for all docvec errors."""


class RequestPreparationError(DocvecError):
    """The embedding request body could not be serialized."""


class EmbeddingError(DocvecError):
    """Base class for failures talking to the embedding service."""


class EmbeddingUnavailable(EmbeddingError):
    """The embedding service could not be reached (transport failure)."""


class EmbeddingServiceError(EmbeddingError):
    """
    The embedding service answered with a non-success status.

    Attributes:
        status: HTTP status code returned by the service.
        detail: Truncated response body (may be empty).
    """

    def __init__(self, status: int, detail: str = "") -> None:
        self.status = status
        self.detail = detail
        super().__init__(f"embedding service returned status: {status}")


class EmbeddingParseError(EmbeddingError):
    """The embedding service response did not contain a usable `embedding` array."""


class PersistenceError(DocvecError):
    """Any storage-layer failure on write or read."""


class VectorFormatError(DocvecError, ValueError):
    """A vector could not be encoded or decoded."""


class DecodeError(VectorFormatError):
    """
    A vector literal contained a component that is not a number.

    Attributes:
        position: Zero-based index of the offending component.
        token: The raw component text.
    """

    def __init__(self, position: int, token: str) -> None:
        self.position = position
        self.token = token
        super().__init__(f"invalid vector component at position {position}: {token!r}")


class DimensionMismatchError(VectorFormatError):
    """A vector's length does not match the configured dimensionality."""

    def __init__(self, expected: int, actual: int, what: Optional[str] = None) -> None:
        self.expected = expected
        self.actual = actual
        label = f"{what} " if what else ""
        super().__init__(f"{label}vector has {actual} dimensions, expected {expected}")
