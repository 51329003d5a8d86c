from __future__ import annotations

import base64
import mimetypes
from pathlib import Path
from typing import Optional

from src.errors import PhotoTooLargeError

OCTET_STREAM = "application/octet-stream"

_SIGNATURES = [
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
]


def detect_mime_type(data: bytes, filename: Optional[str] = None) -> str:
    """Sniff the image type from magic bytes, then fall back to the filename."""
    for signature, mime_type in _SIGNATURES:
        if data.startswith(signature):
            return mime_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    return OCTET_STREAM


def to_data_url(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def read_photo(path: Path, max_bytes: int) -> bytes:
    size = path.stat().st_size
    if size > max_bytes:
        raise PhotoTooLargeError(
            f"Photo {path.name} is {size} bytes; the limit is {max_bytes} bytes."
        )
    return path.read_bytes()
