from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from jsonschema import Draft7Validator

from src.extraction.errors import EnvelopeUnreadableError, NoTextFoundError
from src.extraction.json_tree import JsonKind, kind_of, strict_loads, walk

SCHEMAS_DIR = Path(__file__).resolve().parent / "schemas"
ENVELOPE_SCHEMA = "response_envelope.schema.json"


@dataclass(frozen=True)
class TextFragment:
    text: str
    source: str


@lru_cache(maxsize=1)
def _envelope_validator() -> Draft7Validator:
    schema = json.loads((SCHEMAS_DIR / ENVELOPE_SCHEMA).read_text(encoding="utf-8"))
    return Draft7Validator(schema)


def _usable(value: Any) -> bool:
    return kind_of(value) is JsonKind.STRING and value.strip() != ""


class ResponseTextLocator:
    """Finds the first natural-language text fragment in a provider envelope.

    The Responses API shape (``output[].content[].text``) is tried first.
    Anything else, or a matching envelope without usable text, falls back to
    a depth-first search for the first ``"text"`` key holding a non-blank
    string, anywhere in the tree.
    """

    def locate(self, envelope: bytes | str) -> TextFragment:
        try:
            decoded = strict_loads(envelope)
        except (ValueError, RecursionError) as exc:
            raise EnvelopeUnreadableError(
                f"Failed to parse provider response: {exc}"
            ) from exc

        text = self._typed_text(decoded)
        if text is not None:
            return TextFragment(text=text, source="typed")

        text = self._generic_text(decoded)
        if text is not None:
            return TextFragment(text=text, source="generic")

        raise NoTextFoundError(
            "No output text found in response (maybe only reasoning entries present)."
        )

    def _typed_text(self, decoded: Any) -> Optional[str]:
        if not _envelope_validator().is_valid(decoded):
            return None
        if decoded is None:
            return None
        for item in decoded.get("output") or []:
            parts = (item or {}).get("content") or []
            for part in parts:
                text = self._part_text(part)
                if text is not None:
                    return text
        return None

    def _part_text(self, part: Optional[Dict[str, Any]]) -> Optional[str]:
        if not part:
            return None
        text = part.get("text")
        return text if _usable(text) else None

    def _generic_text(self, decoded: Any) -> Optional[str]:
        for key, value in walk(decoded):
            if key == "text" and _usable(value):
                return value
        return None
