"""
Runtime settings for ClearView AI.

Settings come from the process environment, optionally seeded from a `.env`
file. The Gemini API key is the only required value; a missing key raises
ConfigurationError before any client is built.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from app_config.constants import GeminiConfig
from clearview_core.errors import ConfigurationError

LOG_LEVEL_ENV_VAR = "CLEARVIEW_LOG_LEVEL"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    api_key: str
    model: str = GeminiConfig.DEFAULT_MODEL
    timeout_ms: int = GeminiConfig.DEFAULT_TIMEOUT_MS
    log_level: str = "INFO"


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env: Mapping to read from. Defaults to os.environ after loading `.env`.

    Returns:
        Settings: Validated settings

    Raises:
        ConfigurationError: If the API key is missing or a value is malformed
    """
    if env is None:
        load_dotenv()
        env = os.environ

    api_key = ""
    for name in GeminiConfig.API_KEY_ENV_VARS:
        api_key = (env.get(name) or "").strip()
        if api_key:
            break
    if not api_key:
        names = " or ".join(GeminiConfig.API_KEY_ENV_VARS)
        raise ConfigurationError(f"Missing Gemini API key: set {names}")

    model = (env.get(GeminiConfig.MODEL_ENV_VAR) or "").strip() or GeminiConfig.DEFAULT_MODEL

    raw_timeout = (env.get(GeminiConfig.TIMEOUT_ENV_VAR) or "").strip()
    if raw_timeout:
        try:
            timeout_ms = int(raw_timeout)
        except ValueError:
            raise ConfigurationError(
                f"{GeminiConfig.TIMEOUT_ENV_VAR} must be an integer, got {raw_timeout!r}"
            )
        if timeout_ms <= 0:
            raise ConfigurationError(f"{GeminiConfig.TIMEOUT_ENV_VAR} must be positive")
    else:
        timeout_ms = GeminiConfig.DEFAULT_TIMEOUT_MS

    log_level = (env.get(LOG_LEVEL_ENV_VAR) or "INFO").strip().upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigurationError(
            f"{LOG_LEVEL_ENV_VAR} must be one of {', '.join(VALID_LOG_LEVELS)}, got {log_level!r}"
        )

    return Settings(api_key=api_key, model=model, timeout_ms=timeout_ms, log_level=log_level)
