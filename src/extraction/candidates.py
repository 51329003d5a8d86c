from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from src.extraction.errors import MalformedJSONValueError, NoJSONFoundError
from src.extraction.json_tree import JsonKind, kind_of, strict_loads

FENCE_RE = re.compile(r"```(?:json\s*)?(.*?)```", flags=re.DOTALL)
CLOSERS = {"{": "}", "[": "]"}

STRATEGY_WHOLE_TEXT = "whole-text"
STRATEGY_FENCED_BLOCK = "fenced-block"
STRATEGY_BRACKET_SCAN = "bracket-scan"


@dataclass(frozen=True)
class JSONCandidate:
    text: str
    value: Any
    strategy: str


def _try_parse(text: str) -> Tuple[bool, Any]:
    try:
        value = strict_loads(text)
    except (ValueError, RecursionError):
        return False, None
    if kind_of(value) not in (JsonKind.OBJECT, JsonKind.ARRAY):
        return False, None
    return True, value


class JSONCandidateExtractor:
    """Isolates the JSON object or array a model embedded in its reply.

    Strategies, in priority order:

    1. the whole trimmed text;
    2. the first ```` ``` ```` fence (optionally tagged ``json``);
    3. a backward bracket scan over the whole text.

    A fence that does not parse is not fatal; the scan then runs over the
    entire text, including anything before the fence.
    """

    def extract(self, text: str) -> JSONCandidate:
        stripped = text.strip()

        ok, value = _try_parse(stripped)
        if ok:
            return JSONCandidate(stripped, value, STRATEGY_WHOLE_TEXT)

        candidate = self._from_fence(stripped)
        if candidate is not None:
            return candidate

        candidate = self._from_bracket_scan(stripped)
        if candidate is not None:
            return candidate

        raise NoJSONFoundError("No extractable JSON in text.", text=text)

    def _from_fence(self, text: str) -> Optional[JSONCandidate]:
        match = FENCE_RE.search(text)
        if not match:
            return None
        inner = match.group(1).strip()
        ok, value = _try_parse(inner)
        if not ok:
            return None
        return JSONCandidate(inner, value, STRATEGY_FENCED_BLOCK)

    def _from_bracket_scan(self, text: str) -> Optional[JSONCandidate]:
        starts = [idx for idx in (text.find("{"), text.find("[")) if idx != -1]
        if not starts:
            return None
        start = min(starts)
        closer = CLOSERS[text[start]]
        # Longest span first: walking `end` down from the last character makes
        # an outer value win over any fragment nested in it, and keeps prose
        # after the JSON from being selected. Do not reorder to shortest-first
        # or to a forward raw_decode; both change which value is returned.
        # Quadratic in the worst case, which is why this runs last.
        for end in range(len(text) - 1, start, -1):
            if text[end] != closer:
                continue
            snippet = text[start : end + 1].strip()
            ok, value = _try_parse(snippet)
            if ok:
                return JSONCandidate(snippet, value, STRATEGY_BRACKET_SCAN)
        return None


def to_clean_json(value: Any) -> bytes:
    """Two-space indented, key order preserved, UTF-8 encoded."""
    try:
        rendered = json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False)
        return rendered.encode("utf-8")
    except (TypeError, UnicodeEncodeError, ValueError, RecursionError) as exc:
        raise MalformedJSONValueError(f"Failed to reformat JSON: {exc}") from exc
