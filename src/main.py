from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from src.adapters.mock_adapter import MOCK_SCENARIOS
from src.config import load_settings
from src.extraction.candidates import JSONCandidateExtractor, to_clean_json
from src.extraction.errors import (
    EnvelopeUnreadableError,
    ExtractionError,
    MalformedJSONValueError,
    NoJSONFoundError,
    NoTextFoundError,
)
from src.extraction.pipeline import extract_clean_json
from src.errors import UpstreamError
from src.recognition import UPSTREAM_ERROR_FILE, RecognitionPipeline
from src.utils.time import run_id

EXIT_CODES = {
    EnvelopeUnreadableError: 2,
    NoTextFoundError: 3,
    NoJSONFoundError: 4,
    MalformedJSONValueError: 5,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Car recognizer")
    sub = parser.add_subparsers(dest="command", required=True)

    extract = sub.add_parser("extract", help="Extract clean JSON from a provider response body")
    extract.add_argument("envelope", help="Path to the response body, or - for stdin")

    extract_text = sub.add_parser("extract-text", help="Extract clean JSON from raw model text")
    extract_text.add_argument("text", help="Path to the text, or - for stdin")

    recognize = sub.add_parser("recognize", help="Identify the car in a photo")
    recognize.add_argument("--mode", choices=["mock", "live"], required=True)
    recognize.add_argument("--provider", choices=["openai", "gemini"], default="openai")
    recognize.add_argument("--photo", required=True)
    recognize.add_argument("--config", help="YAML settings file")
    recognize.add_argument(
        "--scenario",
        choices=list(MOCK_SCENARIOS),
        default="responses",
        help="Mock envelope to return in mock mode",
    )
    return parser


def _read_input(source: str) -> bytes:
    if source == "-":
        return sys.stdin.buffer.read()
    return Path(source).read_bytes()


def _exit_code(exc: ExtractionError) -> int:
    return EXIT_CODES.get(type(exc), 1)


def _emit(clean_json: bytes) -> None:
    sys.stdout.buffer.write(clean_json + b"\n")
    sys.stdout.flush()


def _run_recognize(args: argparse.Namespace, base_dir: Path) -> int:
    settings = load_settings(base_dir, Path(args.config) if args.config else None)
    run_dir = settings.resolve(base_dir, settings.runs_dir) / run_id()
    pipeline = RecognitionPipeline(
        args.mode, args.provider, settings, base_dir, scenario=args.scenario
    )
    try:
        result = pipeline.run(Path(args.photo), run_dir)
    except ExtractionError as exc:
        envelope_path = run_dir / "raw" / "response_envelope.json"
        print(f"[recognize] failed parse model output: {exc}", file=sys.stderr)
        print(f"[recognize] full response saved to {envelope_path}", file=sys.stderr)
        return _exit_code(exc)
    except UpstreamError as exc:
        body_path = run_dir / "raw" / UPSTREAM_ERROR_FILE
        print(f"[recognize] provider returned status {exc.status_code}: {exc}", file=sys.stderr)
        print(f"[recognize] upstream body saved to {body_path}", file=sys.stderr)
        return 1
    print(f"[recognize] car info written to {result.run_dir / 'artifacts' / 'car_info.json'}")
    _emit(result.clean_json)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    base_dir = Path(__file__).resolve().parents[1]
    try:
        if args.command == "extract":
            _emit(extract_clean_json(_read_input(args.envelope)))
            return 0
        if args.command == "extract-text":
            text = _read_input(args.text).decode("utf-8")
            candidate = JSONCandidateExtractor().extract(text)
            _emit(to_clean_json(candidate.value))
            return 0
        return _run_recognize(args, base_dir)
    except ExtractionError as exc:
        print(f"[extract] {exc.kind}: {exc}", file=sys.stderr)
        return _exit_code(exc)
    except (RuntimeError, OSError, UnicodeDecodeError) as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
