"""Environment variable loading from .env files with precedence support."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from ...domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Required keys for talking to the catalog service
REQUIRED_API_KEYS = {
    "FLICKR_API_KEY": "Flickr application API key",
    "FLICKR_API_SECRET": "Flickr application shared secret (used to sign requests)",
}


def load_environment_variables(dotenv_path: Path | str | None = None) -> None:
    """
    Load environment variables from .env file with automatic detection.

    Variables already present in the system environment take precedence over
    .env values (``override=False``).

    Args:
        dotenv_path: Optional path to .env file. If None, searches the current
                     working directory and up to 3 parent directories.
    """
    if dotenv_path is None:
        current = Path.cwd()
        search_paths = [current / ".env", *(parent / ".env" for parent in list(current.parents)[:3])]

        for path in search_paths:
            if path.exists():
                dotenv_path = path
                logger.debug(f"Loading .env file from: {path}")
                break

        if dotenv_path is None:
            load_dotenv(override=False)
            return

    dotenv_path = Path(dotenv_path)
    if dotenv_path.exists():
        load_dotenv(dotenv_path, override=False)
        logger.debug(f"Loaded .env file from: {dotenv_path}")
    else:
        logger.debug(f".env file not found at: {dotenv_path}")


def get_env(key: str, default: str | None = None) -> str | None:
    return os.getenv(key, default)


def require_api_key(
    key: str,
    context: str | None = None,
    description: str | None = None,
) -> str:
    """
    Require an environment value with a clear error message.

    Args:
        key: Environment variable name
        context: Optional context describing when this key is required
        description: Optional description of what the key is used for

    Returns:
        Value (never None)

    Raises:
        ConfigurationError: If the key is missing, with guidance on how to set it
    """
    value = get_env(key)
    if value:
        return value

    desc = description or REQUIRED_API_KEYS.get(key, "required setting")
    context_msg = f" ({context})" if context else ""
    hint = (
        f"{desc}{context_msg}. Set {key} in your environment or add it to a .env file, "
        f"e.g. {key}=your-value-here"
    )
    logger.error(f"Required setting '{key}' is missing{context_msg}")
    raise ConfigurationError(key, hint)


def read_token_file(path: Path | str) -> str | None:
    """
    Read a cached auth token.

    Returns:
        Token with surrounding whitespace removed, or None when the file is missing or empty
    """
    path = Path(path).expanduser()
    if not path.exists():
        logger.debug(f"Token file not found: {path}")
        return None
    token = path.read_text(encoding="utf-8").strip()
    return token or None


# Auto-load on import (common pattern for environment modules)
load_environment_variables()
