from __future__ import annotations

import os
import random
import time
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from src.adapters.llm_base import LLMAdapter, LLMResponse, VisionRequest
from src.config import Settings
from src.errors import UpstreamError

FALLBACK_MODELS = ["gemini-2.5-flash"]


class GeminiAdapter(LLMAdapter):
    def __init__(self, settings: Settings, client: Optional[Any] = None) -> None:
        self.settings = settings
        if client is None:
            api_key = os.getenv("GEMINI_API_KEY")
            if not api_key:
                raise RuntimeError("GEMINI_API_KEY is not set.")
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(
                    timeout=int(settings.request_timeout_seconds * 1000)
                ),
            )
        self.client = client

        self.model_candidates: List[str] = [settings.gemini_model]
        self.model_candidates += [m for m in FALLBACK_MODELS if m != settings.gemini_model]
        self.base_delay = float(os.getenv("GEMINI_BASE_DELAY_SECONDS", "1.0"))

    def _is_transient(self, err: Exception) -> bool:
        code = getattr(err, "code", None)
        if code in (429, 500, 502, 503, 504):
            return True
        msg = str(err).lower()
        return any(s in msg for s in ["unavailable", "too many", "timeout", "temporarily"])

    def complete(self, request: VisionRequest) -> LLMResponse:
        last_err: Exception | None = None
        contents = [
            request.prompt,
            types.Part.from_bytes(data=request.image_bytes, mime_type=request.mime_type),
        ]

        for model in self.model_candidates:
            for attempt in range(1, self.settings.max_attempts + 1):
                try:
                    print(f"[gemini] model={model} attempt={attempt}/{self.settings.max_attempts}")
                    response = self.client.models.generate_content(
                        model=model,
                        contents=contents,
                    )
                    envelope = response.model_dump_json(exclude_none=True)
                    return LLMResponse(
                        raw_envelope=envelope.encode("utf-8"),
                        provider="gemini",
                        usage=self._usage(response),
                    )

                except Exception as e:
                    last_err = e
                    if not self._is_transient(e):
                        if isinstance(e, genai_errors.ClientError):
                            raise UpstreamError(
                                f"Gemini rejected the request: {e}", status_code=e.code
                            ) from e
                        break

                delay = self.base_delay * (2 ** (attempt - 1)) + random.random() * 0.5
                print(f"[gemini] transient error: {last_err} -> sleeping {delay:.2f}s")
                time.sleep(delay)

            print(f"[gemini] switching model after failures: {model}")

        raise UpstreamError(
            "Gemini generate_content failed for all candidate models. "
            f"Last error: {last_err}",
            status_code=getattr(last_err, "code", None),
        ) from last_err

    def _usage(self, response: Any) -> Optional[Dict[str, Optional[int]]]:
        meta = getattr(response, "usage_metadata", None)
        if not meta:
            return None
        return {
            "input_tokens": getattr(meta, "prompt_token_count", None),
            "output_tokens": getattr(meta, "candidates_token_count", None),
            "total_tokens": getattr(meta, "total_token_count", None),
        }
