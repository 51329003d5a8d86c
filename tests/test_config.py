from pathlib import Path

import pytest

from src.config import Settings, load_settings
from src.errors import ConfigurationError


def test_defaults(tmp_path, clean_env):
    settings = load_settings(tmp_path)

    assert settings == Settings()
    assert settings.openai_model == "gpt-5-mini"
    assert settings.max_photo_bytes == 10 * 1024 * 1024


def test_yaml_overrides_defaults(tmp_path, clean_env):
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "settings.yaml").write_text(
        "openai_model: gpt-4.1-mini\nmax_attempts: 2\n", encoding="utf-8"
    )

    settings = load_settings(tmp_path)

    assert settings.openai_model == "gpt-4.1-mini"
    assert settings.max_attempts == 2
    assert settings.request_timeout_seconds == 60.0


def test_env_overrides_yaml(tmp_path, clean_env):
    config = tmp_path / "custom.yaml"
    config.write_text("max_text_chars: 1000\n", encoding="utf-8")
    clean_env.setenv("RECOGNIZER_MAX_TEXT_CHARS", "500")
    clean_env.setenv("RECOGNIZER_TIMEOUT_SECONDS", "12.5")

    settings = load_settings(tmp_path, config)

    assert settings.max_text_chars == 500
    assert settings.request_timeout_seconds == 12.5


def test_dotenv_file_is_loaded(tmp_path, clean_env):
    (tmp_path / ".env").write_text("RECOGNIZER_MAX_ATTEMPTS=7\n", encoding="utf-8")

    assert load_settings(tmp_path).max_attempts == 7


def test_invalid_number(tmp_path, clean_env):
    clean_env.setenv("RECOGNIZER_MAX_ATTEMPTS", "many")

    with pytest.raises(ConfigurationError):
        load_settings(tmp_path)


@pytest.mark.parametrize("content", ["- a\n- b\n", "unknown_key: 1\n", "key: [unclosed\n"])
def test_bad_yaml(tmp_path, clean_env, content):
    config = tmp_path / "settings.yaml"
    config.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_settings(tmp_path, config)


def test_resolve(tmp_path):
    settings = Settings()

    assert settings.resolve(tmp_path, "runs") == tmp_path / "runs"
    assert settings.resolve(tmp_path, "/abs/path") == Path("/abs/path")
