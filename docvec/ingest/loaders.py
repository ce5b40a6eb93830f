"""Document loading utilities.

docvec stores *text* only. This module includes:
  - best-effort text/binary sniffing
  - safe reads with encoding fallback
  - media type guessing from the file name
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_MAX_BYTES = 2 * 1024 * 1024


@dataclass
class LoadedFile:
    """Text read from disk plus the labels stored with it."""

    content: str
    file_name: str
    media_type: Optional[str]
    encoding: str


def is_probably_binary(data: bytes) -> bool:
    """Heuristic binary detection."""
    if not data:
        return False
    if b"\x00" in data:
        return True
    text_chars = bytearray({7, 8, 9, 10, 12, 13, 27} | set(range(0x20, 0x100)))
    nontext = data.translate(None, text_chars)
    return float(len(nontext)) / float(len(data)) > 0.30


def guess_media_type(path: Path) -> Optional[str]:
    """Guess a media type from the file extension (markdown included)."""
    if path.suffix.lower() in (".md", ".markdown"):
        return "text/markdown"
    mt, _ = mimetypes.guess_type(path.name)
    return mt


def load_text_file(path: Path, max_bytes: int = DEFAULT_MAX_BYTES) -> LoadedFile:
    """Read a text file up to `max_bytes`.

    Args:
        path: File path.
        max_bytes: Maximum bytes to read.

    Returns:
        LoadedFile with the file name and guessed media type.

    Raises:
        ValueError: If the file appears to be binary.
        OSError: If the file cannot be read.
    """
    raw = path.read_bytes()[:max_bytes]
    if is_probably_binary(raw):
        raise ValueError(f"Binary file detected: {path}")
    try:
        content, encoding = raw.decode("utf-8"), "utf-8"
    except UnicodeDecodeError:
        content, encoding = raw.decode("latin-1"), "latin-1"
    return LoadedFile(content=content, file_name=path.name, media_type=guess_media_type(path), encoding=encoding)
