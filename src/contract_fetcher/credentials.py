"""API key resolution."""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import API_KEY_ENV_VAR, API_KEY_FILE_NAME

logger = logging.getLogger(__name__)


class ApiKeyNotFoundError(Exception):
    """No API key was supplied and none could be read from the environment or key file."""


def default_key_file() -> Path:
    return Path.home() / API_KEY_FILE_NAME


def resolve_api_key(api_key: Optional[str] = None, key_file: Optional[Path] = None) -> str:
    """
    Resolve the Etherscan API key.

    Priority: explicit value > ETHERSCAN_API_KEY environment variable
    (including a loaded .env file) > ~/.etherscankey.

    Args:
        api_key: Key passed directly by the caller
        key_file: Key file to read (defaults to ~/.etherscankey)

    Returns:
        The stripped API key

    Raises:
        ApiKeyNotFoundError: If no non-empty key could be found
    """
    if api_key and api_key.strip():
        return api_key.strip()

    env_key = os.getenv(API_KEY_ENV_VAR, "").strip()
    if env_key:
        logger.debug(f"Using API key from {API_KEY_ENV_VAR}")
        return env_key

    key_path = key_file or default_key_file()
    try:
        key = key_path.read_text(encoding="utf-8").strip()
    except OSError as e:
        raise ApiKeyNotFoundError(f"Unable to read API key from {key_path}: {e}") from e

    if not key:
        raise ApiKeyNotFoundError(f"API key file is empty: {key_path}")

    logger.debug(f"Using API key from {key_path}")
    return key
