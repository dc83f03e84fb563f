from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

DEFAULT_SESSION_SECRET = "change-me"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/todos.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - SESSION_SECRET: key used to sign the session cookie
    - TWITTER_CLIENT_ID / TWITTER_CLIENT_SECRET: OAuth 1.0a consumer credentials
    - APP_URL: public base URL, used in share links. Default 'http://localhost:8000'
    - LOG_LEVEL: logging level name for the package logger. Default 'INFO'
    - OGP_FONT_PATH: optional TrueType font for the share preview image
    """

    persistence_backend: str
    sqlite_db_path: str
    cors_allow_origins: List[str]
    session_secret: str
    twitter_client_id: Optional[str]
    twitter_client_secret: Optional[str]
    app_url: str
    log_level: str
    ogp_font_path: Optional[str]


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _get_optional_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        # Fallback to memory if unsupported
        backend = "memory"

    sqlite_path = _get_env("SQLITE_DB_PATH", "./data/todos.db").strip()
    origins = _parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*"))

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=sqlite_path,
        cors_allow_origins=origins,
        session_secret=_get_env("SESSION_SECRET", DEFAULT_SESSION_SECRET),
        twitter_client_id=_get_optional_env("TWITTER_CLIENT_ID"),
        twitter_client_secret=_get_optional_env("TWITTER_CLIENT_SECRET"),
        app_url=_get_env("APP_URL", "http://localhost:8000").strip().rstrip("/"),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        ogp_font_path=_get_optional_env("OGP_FONT_PATH"),
    )
