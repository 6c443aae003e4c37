"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from config import DEFAULT_MODEL, AppConfig, load_config

ENV_VARS = [
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "LINGOSPHERE_MODEL",
    "LINGOSPHERE_DB_PATH",
    "LINGOSPHERE_REPLY_DELAY",
    "LINGOSPHERE_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # setenv first so teardown also removes anything a .env file loads
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, clean_env, tmp_path):
        """Should fall back to defaults with no environment."""
        config = load_config(tmp_path / "missing.env")
        assert config.gemini_api_key is None
        assert config.model == DEFAULT_MODEL
        assert config.reply_delay_seconds == 0.5

    def test_environment_overrides(self, clean_env, tmp_path):
        """Should read every supported variable."""
        clean_env.setenv("GOOGLE_API_KEY", "abc")
        clean_env.setenv("LINGOSPHERE_MODEL", "gemini-pro")
        clean_env.setenv("LINGOSPHERE_DB_PATH", str(tmp_path / "db.sqlite"))
        clean_env.setenv("LINGOSPHERE_REPLY_DELAY", "0")
        clean_env.setenv("LINGOSPHERE_LOG_LEVEL", "debug")

        config = load_config(tmp_path / "missing.env")

        assert config.gemini_api_key == "abc"
        assert config.model == "gemini-pro"
        assert config.db_path == tmp_path / "db.sqlite"
        assert config.reply_delay_seconds == 0
        assert config.log_level == "DEBUG"

    def test_dotenv_file(self, clean_env, tmp_path):
        """Should load keys from a dotenv file."""
        env_file = tmp_path / ".env"
        env_file.write_text("GEMINI_API_KEY=from-file\n")

        config = load_config(env_file)

        assert config.gemini_api_key == "from-file"

    def test_negative_delay_rejected(self):
        """Should reject a negative reply delay."""
        with pytest.raises(ValidationError):
            AppConfig(reply_delay_seconds=-1)

    def test_db_path_is_path(self):
        """Should coerce the database path to a Path."""
        assert isinstance(AppConfig(db_path="x.db").db_path, Path)
