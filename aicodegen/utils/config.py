"""
Configuration Management
========================

Centralized configuration for the assistant. Environment variables (and a
.env file, if present) are read and typed here once, so the rest of the
code never calls os.getenv() directly.

The OpenAI API key is the only required value. It is taken from
OPENAI_API_KEY, falling back to the key stored by `aicodegen init`.

Usage:
    from aicodegen.utils.config import get_config

    config = get_config()
    print(config.openai.model)
    print(config.agent.summarize_threshold)
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from aicodegen.utils.credentials import load_api_key


def _optional(name: str, default: str) -> str:
    return os.getenv(name, default)


def _optional_int(name: str, default: int) -> int:
    """
    Get an optional integer environment variable.

    Invalid values fall back to the default with a warning.
    """
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        print(f"Warning: {name} is not a valid integer, using default: {default}")
        return default


def _optional_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        print(f"Warning: {name} is not a valid number, using default: {default}")
        return default


def _api_key() -> str:
    """
    Resolve the API key from the environment or the credential store.

    Raises:
        ValueError: If neither source provides a key
    """
    value = os.getenv("OPENAI_API_KEY") or load_api_key()
    if not value:
        raise ValueError(
            "Missing OpenAI API key.\n"
            'Run "aicodegen init" to store one, or set OPENAI_API_KEY.'
        )
    return value


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class OpenAIConfig:
    """Model backend configuration."""
    api_key: str
    model: str
    temperature: float
    base_url: str | None   # Alternate OpenAI-compatible endpoint


@dataclass(frozen=True)
class AgentConfig:
    """Agent loop configuration."""
    summarize_threshold: int   # Serialized conversation size that triggers compaction


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

        config = get_config()
        config.openai.model
        config.agent.summarize_threshold
    """
    openai: OpenAIConfig
    agent: AgentConfig
    log_level: str


DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_SUMMARIZE_THRESHOLD = 200_000


def load_config() -> Config:
    """
    Load and validate configuration from the environment.

    Returns:
        Config: The validated configuration

    Raises:
        ValueError: If no API key is available
    """
    load_dotenv()

    return Config(
        openai=OpenAIConfig(
            api_key=_api_key(),
            model=_optional("AICODEGEN_MODEL", DEFAULT_MODEL),
            temperature=_optional_float("AICODEGEN_TEMPERATURE", DEFAULT_TEMPERATURE),
            base_url=os.getenv("OPENAI_BASE_URL") or None,
        ),
        agent=AgentConfig(
            summarize_threshold=_optional_int(
                "AICODEGEN_SUMMARIZE_THRESHOLD", DEFAULT_SUMMARIZE_THRESHOLD
            ),
        ),
        log_level=_optional("LOG_LEVEL", "warning"),
    )


# ==============================================================================
# Singleton
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """
    Get the process-wide configuration, loading it on first access.

    Returns:
        Config: The application configuration
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
