from __future__ import annotations

import os
import time
from typing import Any, Dict, List, Optional

from openai import OpenAI
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)

from src.adapters.llm_base import LLMAdapter, LLMResponse, VisionRequest
from src.config import Settings
from src.errors import UpstreamError
from src.utils.images import to_data_url


def build_input(request: VisionRequest) -> List[Dict[str, Any]]:
    return [
        {
            "role": "user",
            "content": [
                {"type": "input_text", "text": request.prompt},
                {
                    "type": "input_image",
                    "image_url": to_data_url(request.image_bytes, request.mime_type),
                },
            ],
        }
    ]


class OpenAIAdapter(LLMAdapter):
    """Responses API call returning the provider's body untouched."""

    def __init__(self, settings: Settings, client: Optional[OpenAI] = None) -> None:
        self.settings = settings
        if client is None:
            api_key = os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise RuntimeError("server not configured: set OPENAI_API_KEY env var")
            client = OpenAI(
                api_key=api_key,
                timeout=settings.request_timeout_seconds,
                max_retries=0,
            )
        self.client = client

    def complete(self, request: VisionRequest) -> LLMResponse:
        model = self.settings.openai_model
        attempt = 0
        backoff = 1.0
        while True:
            attempt += 1
            try:
                raw = self.client.responses.with_raw_response.create(
                    model=model,
                    input=build_input(request),
                )
                usage = self._usage(raw.parse())
                if usage:
                    print(
                        f"[openai] model={model} "
                        f"input_tokens={usage['input_tokens']} "
                        f"output_tokens={usage['output_tokens']} "
                        f"total_tokens={usage['total_tokens']}"
                    )
                else:
                    print("[openai] usage not provided by SDK")
                return LLMResponse(
                    raw_envelope=raw.http_response.content,
                    provider="openai",
                    usage=usage,
                )
            except RateLimitError as exc:
                if getattr(exc, "code", None) == "insufficient_quota":
                    raise RuntimeError(
                        "OpenAI API quota exceeded. Please enable billing in your OpenAI account."
                    ) from exc
                if attempt >= self.settings.max_attempts:
                    raise self._upstream(exc) from exc
            except (APITimeoutError, APIConnectionError) as exc:
                if attempt >= self.settings.max_attempts:
                    raise UpstreamError(f"request to OpenAI failed: {exc}") from exc
            except InternalServerError as exc:
                if attempt >= self.settings.max_attempts:
                    raise self._upstream(exc) from exc
            except APIStatusError as exc:
                raise self._upstream(exc) from exc
            print(f"[openai] transient error on attempt {attempt}; sleeping {backoff:.1f}s")
            time.sleep(backoff)
            backoff *= 2

    def _usage(self, parsed: Any) -> Optional[Dict[str, Optional[int]]]:
        usage = getattr(parsed, "usage", None)
        if not usage:
            return None
        return {
            "input_tokens": getattr(usage, "input_tokens", None),
            "output_tokens": getattr(usage, "output_tokens", None),
            "total_tokens": getattr(usage, "total_tokens", None),
        }

    def _upstream(self, exc: APIStatusError) -> UpstreamError:
        body = exc.response.content if exc.response is not None else b""
        return UpstreamError(
            f"OpenAI returned HTTP {exc.status_code}",
            status_code=exc.status_code,
            body=body,
        )
