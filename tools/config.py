"""
Resolve relay settings from the environment. Fail fast if required setup is missing.
Optional .env file (ENV_FILE, default .env) is loaded first; real environment wins.
"""

import os
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

from tools.errors import ConfigError, INVALID_VARIABLE, MISSING_VARIABLE
from tools.models import Configuration

REQUIRED = ["MAILCHIMP_API_KEY", "MAILCHIMP_LIST_ID", "BASECAMP_BOT_URL"]
DEFAULT_PORT = 3000
DEFAULT_TIMEOUT_SEC = 10


def load_environment() -> None:
    """Load environment variables from a .env file if present."""
    env_path = Path(os.environ.get("ENV_FILE", ".env"))
    if env_path.is_file():
        load_dotenv(env_path, override=False)


def _env(key: str) -> str:
    return (os.environ.get(key) or "").strip()


def _number(key: str, default, cast):
    raw = _env(key)
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(INVALID_VARIABLE, f"{key}={raw!r} is not a number") from None
    if value <= 0:
        raise ConfigError(INVALID_VARIABLE, f"{key} must be positive")
    return value


def load_config() -> Configuration:
    load_environment()
    missing = [key for key in REQUIRED if not _env(key)]
    if missing:
        raise ConfigError(MISSING_VARIABLE, ", ".join(missing))
    webhook_url = _env("BASECAMP_BOT_URL")
    if urlparse(webhook_url).scheme not in ("http", "https"):
        raise ConfigError(INVALID_VARIABLE, "BASECAMP_BOT_URL must be an http(s) URL")
    return Configuration(
        api_key=_env("MAILCHIMP_API_KEY"),
        list_id=_env("MAILCHIMP_LIST_ID"),
        webhook_url=webhook_url,
        # Any non-empty value switches production on, including "false".
        production=bool(_env("RELAY_PRODUCTION")),
        port=_number("FUNCTIONS_CUSTOMHANDLER_PORT", DEFAULT_PORT, int),
        fetch_timeout=_number("FETCH_TIMEOUT_SEC", DEFAULT_TIMEOUT_SEC, float),
        publish_timeout=_number("DELIVERY_TIMEOUT_SEC", DEFAULT_TIMEOUT_SEC, float),
    )
