# docvec/vectordb/codec.py
"""pgvector text literal codec.

pgvector accepts and prints vectors as ``[v1,v2,...,vn]``. Components are
32-bit floats; we write them fixed-point with 6 fractional digits so the
literal never contains scientific notation.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from ..errors import DecodeError, DimensionMismatchError, VectorFormatError

FRACTION_DIGITS = 6


def encode_vector(vector: Sequence[float]) -> str:
    """
    Encode a vector as a pgvector literal.

    Args:
        vector: Ordered float components.

    Returns:
        Literal such as ``[0.100000,-2.500000]``.

    Raises:
        VectorFormatError: If the input is not one-dimensional or holds NaN/Inf.
    """
    try:
        arr = np.asarray(vector, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise VectorFormatError(f"vector is not numeric: {e}") from e

    if arr.ndim != 1:
        raise VectorFormatError(f"vector must be one-dimensional, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise VectorFormatError("vector contains NaN or infinite components")

    return "[" + ",".join(f"{float(x):.{FRACTION_DIGITS}f}" for x in arr) + "]"


def decode_vector(text: str, strict: bool = True) -> List[float]:
    """
    Decode a pgvector literal.

    Args:
        text: Literal such as ``[1,2,3]``. Whitespace around tokens is ignored.
        strict: If True, a non-numeric component raises DecodeError.
            If False, it is read as 0.0 and the vector keeps its length.

    Returns:
        List of floats (empty for ``[]``).

    Raises:
        DecodeError: On a bad component in strict mode.
    """
    inner = text.strip().strip("[]")
    if not inner.strip():
        return []

    out: List[float] = []
    for i, part in enumerate(inner.split(",")):
        token = part.strip()
        try:
            value = float(token)
        except ValueError:
            if strict:
                raise DecodeError(i, token) from None
            value = 0.0
        else:
            if strict and not np.isfinite(value):
                raise DecodeError(i, token)
        out.append(value)
    return out


def check_dimensions(vector: Sequence[float], expected: Optional[int], what: Optional[str] = None) -> None:
    """Raise DimensionMismatchError if `expected` is set and the length differs."""
    if expected is not None and len(vector) != expected:
        raise DimensionMismatchError(expected, len(vector), what)
