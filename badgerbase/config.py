"""
Runtime configuration.

Settings come from environment variables; a `.env` file in the working
directory is loaded first (python-dotenv) so secrets do not have to be
exported by hand:

    BADGERBASE_API_URL        course-search API base URL
    BADGERBASE_CLIENT_SECRET  sent as x-client-secret
    BADGERBASE_API_KEY        sent as x-api-key
    SUBSCRIPTION_URL          subscription backend base URL
    SUBSCRIPTION_API_KEY      sent as X-API-Key to the subscription backend
    BADGERBASE_ACCESS_TOKEN   bearer token of the logged-in user
    BADGERBASE_EMAIL          email of the logged-in user
    BADGERBASE_TIMEOUT        request timeout in seconds (default 15)
    BADGERBASE_LOG_LEVEL      logging level (default WARNING)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv


DEFAULT_API_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 15.0


def data_dir() -> Path:
    """
    Directory for local state (saved filters).

    A function instead of a constant so tests can override paths.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data"


@dataclass
class Settings:
    api_url: str = DEFAULT_API_URL
    client_secret: str = ""
    api_key: str = ""
    subscription_url: str = ""
    subscription_api_key: str = ""
    access_token: str = ""
    email: str = ""
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "WARNING"


def _timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT
    return value if value > 0 else DEFAULT_TIMEOUT


def load_settings(environ: Optional[Mapping[str, str]] = None, use_dotenv: bool = True) -> Settings:
    """
    Read Settings from the environment (or from `environ` in tests).
    """
    if environ is None:
        if use_dotenv:
            load_dotenv()
        environ = os.environ

    def get(name: str, default: str = "") -> str:
        return (environ.get(name) or default).strip()

    return Settings(
        api_url=get("BADGERBASE_API_URL", DEFAULT_API_URL).rstrip("/"),
        client_secret=get("BADGERBASE_CLIENT_SECRET"),
        api_key=get("BADGERBASE_API_KEY"),
        subscription_url=get("SUBSCRIPTION_URL").rstrip("/"),
        subscription_api_key=get("SUBSCRIPTION_API_KEY"),
        access_token=get("BADGERBASE_ACCESS_TOKEN"),
        email=get("BADGERBASE_EMAIL"),
        timeout=_timeout(environ.get("BADGERBASE_TIMEOUT")),
        log_level=get("BADGERBASE_LOG_LEVEL", "WARNING").upper(),
    )
