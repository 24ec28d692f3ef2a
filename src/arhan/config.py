"""centralized configuration management using pydantic settings.

configuration is loaded from environment variables and two optional .env
files: ~/.lowkeyarhan/.env (user-wide) and ./.env (per project, wins).
an optional config.yaml in the working directory tunes request parameters.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import get_logger

logger = get_logger(__name__)

USER_ENV_FILE = Path.home() / ".lowkeyarhan" / ".env"
DEFAULT_MODEL = "google/gemini-2.0-flash-exp:free"
DEFAULT_HISTORY_FILE = ".arhan_history.json"
DEFAULT_MAX_ITERATIONS = 20


class Settings(BaseSettings):
    """main settings class for the agent.

    attributes:
        openrouter_api_key: api key for openrouter (required to run)
        openrouter_model: default model id when --model is not given
        openrouter_base_url: chat-completion endpoint base url
        app_url: sent as the HTTP-Referer header for openrouter rankings
        app_name: sent as the X-Title header
        log_level: logging level (DEBUG, INFO, WARNING, ERROR)
    """

    model_config = SettingsConfigDict(
        env_file=(USER_ENV_FILE, ".env"),
        env_file_encoding="utf-8",
        extra="ignore",  # ignore extra env vars
        populate_by_name=True,
    )

    openrouter_api_key: str | None = None
    openrouter_model: str = DEFAULT_MODEL
    openrouter_base_url: str = "https://openrouter.ai/api/v1"

    app_url: str = "http://localhost"
    app_name: str = "Arhan CLI"

    log_level: str = Field(default="WARNING", alias="ARHAN_LOG_LEVEL")

    def default_headers(self) -> dict[str, str]:
        """headers openrouter uses to attribute requests to the app."""
        return {"HTTP-Referer": self.app_url, "X-Title": self.app_name}


@lru_cache
def get_settings() -> Settings:
    """get the singleton settings instance.

    call get_settings.cache_clear() to reload settings if needed.
    """
    return Settings()


def load_yaml_config(path: str | Path = "config.yaml") -> dict[str, Any]:
    """load configuration from config.yaml if it exists.

    a malformed file is logged and ignored rather than aborting startup.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        logger.warning(f"ignoring malformed {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"ignoring {path}: expected a mapping at top level")
        return {}
    return data


def resolve_model(cli_model: str | None, yaml_config: dict[str, Any], settings: Settings) -> str:
    """pick the model id.

    priority order:
    1. CLI argument
    2. config file (config.yaml, llm.model)
    3. environment (OPENROUTER_MODEL) / built-in default
    """
    llm_config = yaml_config.get("llm") or {}
    return cli_model or llm_config.get("model") or settings.openrouter_model
