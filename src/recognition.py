from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from src.adapters.gemini_adapter import GeminiAdapter
from src.adapters.llm_base import LLMAdapter, LLMResponse, VisionRequest
from src.adapters.mock_adapter import MockAdapter
from src.adapters.openai_adapter import OpenAIAdapter
from src.artifacts.writers import write_car_info, write_run_summary
from src.config import Settings
from src.errors import FragmentTooLargeError, UpstreamError
from src.extraction.errors import ExtractionError
from src.extraction.locator import ResponseTextLocator
from src.extraction.pipeline import Extraction, extract_fragment
from src.utils.images import detect_mime_type, read_photo
from src.utils.io import read_text, write_bytes, write_json
from src.utils.time import iso_timestamp

UPSTREAM_ERROR_FILE = "upstream_error.json"


@dataclass
class RecognitionResult:
    clean_json: bytes
    extraction: Extraction
    run_dir: Path
    response: LLMResponse


class RecognitionPipeline:
    def __init__(
        self,
        mode: str,
        provider: str,
        settings: Settings,
        base_dir: Path,
        scenario: str = "responses",
        adapter: Optional[LLMAdapter] = None,
    ) -> None:
        self.mode = mode
        self.provider = provider
        self.settings = settings
        self.base_dir = base_dir
        self.scenario = scenario
        self._adapter_override = adapter

    def run(self, photo_path: Path, run_dir: Path) -> RecognitionResult:
        raw_dir = run_dir / "raw"
        artifacts_dir = run_dir / "artifacts"
        raw_dir.mkdir(parents=True, exist_ok=True)
        artifacts_dir.mkdir(parents=True, exist_ok=True)

        image_bytes = read_photo(photo_path, self.settings.max_photo_bytes)
        mime_type = detect_mime_type(image_bytes, photo_path.name)
        prompt = read_text(self.settings.resolve(self.base_dir, self.settings.prompt_path))

        summary: Dict[str, object] = {
            "run_id": run_dir.name,
            "started_at": iso_timestamp(),
            "mode": self.mode,
            "provider": self.provider if self.mode == "live" else f"mock:{self.scenario}",
            "photo": photo_path.name,
            "mime_type": mime_type,
        }

        adapter = self._adapter()
        try:
            response = adapter.complete(
                VisionRequest(prompt=prompt, image_bytes=image_bytes, mime_type=mime_type)
            )
        except UpstreamError as exc:
            write_bytes(raw_dir / UPSTREAM_ERROR_FILE, exc.body)
            write_run_summary(
                artifacts_dir / "run_summary.md",
                summary,
                error=f"upstream status {exc.status_code}: {exc}",
            )
            raise
        write_bytes(raw_dir / "response_envelope.json", response.raw_envelope)
        if response.usage:
            write_json(raw_dir / "usage.json", response.usage)
            summary["usage"] = response.usage

        try:
            extraction = self._extract(response.raw_envelope)
        except (ExtractionError, FragmentTooLargeError) as exc:
            kind = getattr(exc, "kind", type(exc).__name__)
            write_run_summary(artifacts_dir / "run_summary.md", summary, error=f"{kind}: {exc}")
            raise

        summary["text_source"] = extraction.fragment.source
        summary["strategy"] = extraction.candidate.strategy
        if os.getenv("RECOGNIZER_DEBUG_EXTRACT", "") == "1":
            print(
                f"[extract] text_source={extraction.fragment.source} "
                f"strategy={extraction.candidate.strategy}"
            )

        write_car_info(artifacts_dir / "car_info.json", extraction.clean_json)
        write_run_summary(artifacts_dir / "run_summary.md", summary)
        return RecognitionResult(
            clean_json=extraction.clean_json,
            extraction=extraction,
            run_dir=run_dir,
            response=response,
        )

    def _extract(self, envelope: bytes) -> Extraction:
        fragment = ResponseTextLocator().locate(envelope)
        limit = self.settings.max_text_chars
        if len(fragment.text) > limit:
            raise FragmentTooLargeError(
                f"Model output is {len(fragment.text)} characters; the limit is {limit}."
            )
        return extract_fragment(fragment)

    def _adapter(self) -> LLMAdapter:
        if self._adapter_override is not None:
            return self._adapter_override
        if self.mode == "mock":
            return MockAdapter(scenario=self.scenario)
        if self.provider == "gemini":
            return GeminiAdapter(self.settings)
        return OpenAIAdapter(self.settings)
