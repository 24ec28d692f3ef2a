"""Tests for configuration and logging setup."""

import logging

import pytest

from arhan.config import DEFAULT_MODEL, Settings, load_yaml_config, resolve_model
from arhan.logging import LOGGER_NAME, setup_logging


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("OPENROUTER_API_KEY", "OPENROUTER_MODEL", "APP_URL", "APP_NAME", "ARHAN_LOG_LEVEL", "ARHAN_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.openrouter_api_key is None
        assert settings.openrouter_model == DEFAULT_MODEL
        assert settings.openrouter_base_url == "https://openrouter.ai/api/v1"
        assert settings.log_level == "WARNING"
        assert settings.default_headers() == {"HTTP-Referer": "http://localhost", "X-Title": "Arhan CLI"}

    def test_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-env")
        monkeypatch.setenv("OPENROUTER_MODEL", "vendor/env-model")
        monkeypatch.setenv("ARHAN_LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.openrouter_api_key == "sk-env"
        assert settings.openrouter_model == "vendor/env-model"
        assert settings.log_level == "DEBUG"

    def test_dotenv_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("OPENROUTER_API_KEY=sk-file\nAPP_NAME=Tester\n")

        settings = Settings(_env_file=env_file)

        assert settings.openrouter_api_key == "sk-file"
        assert settings.default_headers()["X-Title"] == "Tester"


class TestYamlConfig:
    """Tests for config.yaml loading and model resolution."""

    def test_missing_file(self, tmp_path):
        assert load_yaml_config(tmp_path / "config.yaml") == {}

    def test_llm_section(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("llm:\n  model: vendor/yaml-model\n  temperature: 0.2\n")

        assert load_yaml_config(path) == {"llm": {"model": "vendor/yaml-model", "temperature": 0.2}}

    @pytest.mark.parametrize("content", ["llm: [unclosed", "- just\n- a list\n"])
    def test_unusable_file_is_ignored(self, tmp_path, content):
        path = tmp_path / "config.yaml"
        path.write_text(content)

        assert load_yaml_config(path) == {}

    def test_model_priority(self, clean_env, monkeypatch):
        monkeypatch.setenv("OPENROUTER_MODEL", "vendor/env-model")
        settings = Settings(_env_file=None)
        yaml_config = {"llm": {"model": "vendor/yaml-model"}}

        assert resolve_model("vendor/cli-model", yaml_config, settings) == "vendor/cli-model"
        assert resolve_model(None, yaml_config, settings) == "vendor/yaml-model"
        assert resolve_model(None, {}, settings) == "vendor/env-model"
        assert resolve_model(None, {"llm": None}, settings) == "vendor/env-model"


class TestLogging:
    """Tests for setup_logging."""

    def test_level_from_argument(self, clean_env):
        logger = setup_logging("DEBUG")

        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_level_from_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("ARHAN_LOG_LEVEL", "error")

        assert setup_logging().level == logging.ERROR

    def test_invalid_level_falls_back(self, clean_env, capsys):
        logger = setup_logging("CHATTY")

        assert logger.level == logging.WARNING
        assert "Invalid log level" in capsys.readouterr().err

    def test_log_file(self, clean_env, tmp_path):
        log_path = tmp_path / "logs" / "arhan.log"
        logger = setup_logging("INFO", str(log_path))

        logging.getLogger("arhan.tests").info("hello file")
        for handler in logger.handlers:
            handler.flush()

        assert "hello file" in log_path.read_text()
