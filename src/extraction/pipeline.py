from __future__ import annotations

from dataclasses import dataclass

from src.extraction.candidates import JSONCandidate, JSONCandidateExtractor, to_clean_json
from src.extraction.locator import ResponseTextLocator, TextFragment


@dataclass(frozen=True)
class Extraction:
    fragment: TextFragment
    candidate: JSONCandidate
    clean_json: bytes


def extract_envelope(envelope: bytes | str) -> Extraction:
    fragment = ResponseTextLocator().locate(envelope)
    return extract_fragment(fragment)


def extract_fragment(fragment: TextFragment) -> Extraction:
    candidate = JSONCandidateExtractor().extract(fragment.text)
    return Extraction(
        fragment=fragment,
        candidate=candidate,
        clean_json=to_clean_json(candidate.value),
    )


def extract_clean_json(envelope: bytes | str) -> bytes:
    """Envelope bytes in, indented JSON bytes out.

    Raises one of the ``ExtractionError`` subclasses otherwise; never returns
    a partial result.
    """
    return extract_envelope(envelope).clean_json
