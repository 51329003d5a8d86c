from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from src.errors import ConfigurationError

DEFAULT_CONFIG_PATH = Path("configs") / "settings.yaml"

ENV_KEYS = {
    "openai_model": "OPENAI_MODEL",
    "gemini_model": "GEMINI_MODEL",
    "request_timeout_seconds": "RECOGNIZER_TIMEOUT_SECONDS",
    "max_attempts": "RECOGNIZER_MAX_ATTEMPTS",
    "max_photo_bytes": "RECOGNIZER_MAX_PHOTO_BYTES",
    "max_text_chars": "RECOGNIZER_MAX_TEXT_CHARS",
    "prompt_path": "RECOGNIZER_PROMPT_PATH",
    "runs_dir": "RECOGNIZER_RUNS_DIR",
}


@dataclass(frozen=True)
class Settings:
    openai_model: str = "gpt-5-mini"
    gemini_model: str = "gemini-flash-latest"
    request_timeout_seconds: float = 60.0
    max_attempts: int = 4
    max_photo_bytes: int = 10 << 20
    max_text_chars: int = 200_000
    prompt_path: str = "configs/prompts/car_identification.md"
    runs_dir: str = "runs"

    def resolve(self, base_dir: Path, value: str) -> Path:
        path = Path(value)
        return path if path.is_absolute() else base_dir / path


def _coerce(name: str, raw: Any) -> Any:
    default = getattr(Settings, name)
    try:
        if isinstance(default, int):
            return int(raw)
        if isinstance(default, float):
            return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from exc
    return str(raw)


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Could not parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping, got {type(data).__name__}.")
    return data


def load_settings(base_dir: Path, config_path: Optional[Path] = None) -> Settings:
    """Defaults, then the YAML file, then environment variables (and .env)."""
    load_dotenv(base_dir / ".env")
    known = {field.name for field in fields(Settings)}
    overrides: Dict[str, Any] = {}

    yaml_path = config_path or base_dir / DEFAULT_CONFIG_PATH
    for key, value in _read_yaml(yaml_path).items():
        if key not in known:
            raise ConfigurationError(f"Unknown setting in {yaml_path}: {key}")
        overrides[key] = _coerce(key, value)

    for name, env_key in ENV_KEYS.items():
        value = os.getenv(env_key)
        if value:
            overrides[name] = _coerce(name, value)

    return replace(Settings(), **overrides)
