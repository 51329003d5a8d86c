from __future__ import annotations


class ExtractionError(ValueError):
    """Base class for failures of the envelope -> clean JSON extraction."""

    kind = "extraction_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EnvelopeUnreadableError(ExtractionError):
    """The provider response body is not a JSON document."""

    kind = "envelope_unreadable"


class NoTextFoundError(ExtractionError):
    """The envelope decoded, but no non-empty text fragment exists in it."""

    kind = "no_text_found"


class NoJSONFoundError(ExtractionError):
    """A text fragment was located, but none of the strategies parsed."""

    kind = "no_json_found"

    def __init__(self, message: str, text: str) -> None:
        super().__init__(message)
        self.text = text


class MalformedJSONValueError(ExtractionError):
    """A candidate parsed but could not be re-serialized."""

    kind = "malformed_json_value"
