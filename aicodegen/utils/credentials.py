"""
Credential Store
================

Persists the OpenAI API key entered with `aicodegen init` so that later
sessions can start without environment variables.

The key lives in a small JSON file:

    ~/.aicodegen/config.json
    {
      "OPENAI_API_KEY": "sk-..."
    }

AICODEGEN_HOME relocates the directory (used by the tests).
"""

import json
import os
from pathlib import Path

from aicodegen.utils.logger import Logger

logger = Logger("Credentials")

API_KEY_FIELD = "OPENAI_API_KEY"


def config_dir() -> Path:
    """Directory holding the credential file."""
    home = os.getenv("AICODEGEN_HOME")
    if home:
        return Path(home)
    return Path.home() / ".aicodegen"


def config_path() -> Path:
    return config_dir() / "config.json"


def save_api_key(api_key: str) -> Path:
    """
    Store the API key, creating the config directory if needed.

    Args:
        api_key: The key to persist

    Returns:
        Path of the written config file

    Raises:
        ValueError: If the key is empty
    """
    api_key = api_key.strip()
    if not api_key:
        raise ValueError("API key must not be empty")

    path = config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({API_KEY_FIELD: api_key}, indent=2), encoding="utf-8")
    logger.info(f"Saved API key to {path}")
    return path


def load_api_key() -> str | None:
    """
    Read the stored API key.

    Returns:
        The key, or None when no config file exists or it holds no key

    Raises:
        ValueError: If the config file exists but is not valid JSON
    """
    path = config_path()
    if not path.exists():
        return None

    try:
        stored = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Config file {path} is not valid JSON: {e}") from e

    if not isinstance(stored, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")

    return stored.get(API_KEY_FIELD) or None
