"""
Settings loaded from the environment (and a .env file when present).
"""

import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .constants import DEFAULT_CONFIG, VWS_URL
from .exceptions import ConfigurationError

ENV_ACCESS_KEY = "VWS_ACCESS_KEY"
ENV_SECRET_KEY = "VWS_SECRET_KEY"
ENV_BASE_URL = "VWS_BASE_URL"
ENV_CONNECT_TIMEOUT = "VWS_CONNECT_TIMEOUT"
ENV_READ_TIMEOUT = "VWS_READ_TIMEOUT"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def load_settings(env_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Read client settings from environment variables.

    Args:
        env_file: Optional path of a .env file to load first

    Returns:
        Dict with access_key, secret_key, base_url, connect_timeout, read_timeout

    Raises:
        ConfigurationError: If keys are missing or timeouts are not numbers
    """
    load_dotenv(env_file)

    access_key = os.getenv(ENV_ACCESS_KEY, "")
    secret_key = os.getenv(ENV_SECRET_KEY, "")
    if not access_key or not secret_key:
        raise ConfigurationError(f"{ENV_ACCESS_KEY} and {ENV_SECRET_KEY} must be set")

    return {
        'access_key': access_key,
        'secret_key': secret_key,
        'base_url': os.getenv(ENV_BASE_URL) or VWS_URL,
        'connect_timeout': _float_env(ENV_CONNECT_TIMEOUT, DEFAULT_CONFIG['connect_timeout']),
        'read_timeout': _float_env(ENV_READ_TIMEOUT, DEFAULT_CONFIG['read_timeout']),
    }
