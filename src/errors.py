from __future__ import annotations

from typing import Optional


class RecognitionError(RuntimeError):
    """Base class for failures outside the extraction core."""


class ConfigurationError(RecognitionError):
    pass


class UpstreamError(RecognitionError):
    """The provider answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: bytes = b"") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class PhotoTooLargeError(RecognitionError):
    pass


class FragmentTooLargeError(RecognitionError):
    pass
