from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict

from .llm_base import LLMAdapter, LLMResponse, VisionRequest

MOCK_SCENARIOS = ("responses", "fenced", "generic", "reasoning_only", "no_json")

CAR_INFO: Dict[str, Any] = {
    "make": "Toyota",
    "model": "Corolla",
    "generation": "E210",
    "year_range": "2019-2024",
    "body_type": "sedan",
    "color": "silver",
    "confidence": 0.82,
}


def _responses_envelope(text: str) -> Dict[str, Any]:
    return {
        "id": "resp_mock",
        "object": "response",
        "status": "completed",
        "output": [
            {"id": "rs_mock", "type": "reasoning", "summary": []},
            {
                "id": "msg_mock",
                "type": "message",
                "role": "assistant",
                "content": [{"type": "output_text", "text": text, "annotations": []}],
            },
        ],
        "usage": {"input_tokens": 812, "output_tokens": 64, "total_tokens": 876},
    }


@dataclass
class MockAdapter(LLMAdapter):
    scenario: str = "responses"

    def complete(self, request: VisionRequest) -> LLMResponse:
        payload = self._build_envelope()
        return LLMResponse(
            raw_envelope=json.dumps(payload).encode("utf-8"),
            provider="mock",
            usage=payload.get("usage"),
        )

    def _build_envelope(self) -> Dict[str, Any]:
        car_json = json.dumps(CAR_INFO)
        if self.scenario == "responses":
            return _responses_envelope(car_json)
        if self.scenario == "fenced":
            return _responses_envelope(
                "Here is what I can tell from the photo:\n\n"
                f"```json\n{json.dumps(CAR_INFO, indent=4)}\n```\n"
                "Let me know if you need anything else."
            )
        if self.scenario == "generic":
            return {
                "candidates": [
                    {
                        "content": {"role": "model", "parts": [{"text": car_json}]},
                        "finish_reason": "STOP",
                    }
                ],
                "model_version": "mock-vision",
            }
        if self.scenario == "reasoning_only":
            return {
                "output": [{"id": "rs_mock", "type": "reasoning", "summary": []}],
                "status": "incomplete",
            }
        if self.scenario == "no_json":
            return _responses_envelope("I cannot determine this car.")
        raise ValueError(f"Unknown mock scenario: {self.scenario}")
