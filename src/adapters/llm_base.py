from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol


@dataclass(frozen=True)
class VisionRequest:
    prompt: str
    image_bytes: bytes
    mime_type: str


@dataclass
class LLMResponse:
    raw_envelope: bytes
    provider: str
    usage: Optional[Dict[str, Optional[int]]] = field(default=None)


class LLMAdapter(Protocol):
    def complete(self, request: VisionRequest) -> LLMResponse:
        raise NotImplementedError
