"""
Utilities Module
================

Shared plumbing:
- logger: coloured, context-aware console logging
- config: environment-driven configuration
- credentials: API key storage for `aicodegen init`
- extract_text: plain text from source files and documents
"""

from aicodegen.utils.logger import Logger
from aicodegen.utils.config import get_config, Config

__all__ = ["Logger", "get_config", "Config"]
