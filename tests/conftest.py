import pytest

from src.config import ENV_KEYS
from tests.helpers import JPEG_BYTES


@pytest.fixture
def clean_env(monkeypatch):
    """Unset recognizer variables; anything load_dotenv adds is undone too."""
    for key in list(ENV_KEYS.values()) + ["OPENAI_API_KEY", "GEMINI_API_KEY", "RECOGNIZER_DEBUG_EXTRACT"]:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


@pytest.fixture
def photo(tmp_path):
    path = tmp_path / "car.jpg"
    path.write_bytes(JPEG_BYTES)
    return path


@pytest.fixture
def base_dir(tmp_path):
    prompt = tmp_path / "configs" / "prompts" / "car_identification.md"
    prompt.parent.mkdir(parents=True)
    prompt.write_text("Identify the car. Reply with JSON.", encoding="utf-8")
    return tmp_path
