import logging

from social_todo.logging_config import PACKAGE_LOGGER, configure_logging
from social_todo.settings import DEFAULT_SESSION_SECRET, get_settings


def test_defaults(monkeypatch):
    for name in (
        "PERSISTENCE_BACKEND",
        "SESSION_SECRET",
        "TWITTER_CLIENT_ID",
        "TWITTER_CLIENT_SECRET",
        "APP_URL",
        "LOG_LEVEL",
        "OGP_FONT_PATH",
        "CORS_ALLOW_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
    settings = get_settings()
    assert settings.persistence_backend == "memory"
    assert settings.session_secret == DEFAULT_SESSION_SECRET
    assert settings.twitter_client_id is None
    assert settings.app_url == "http://localhost:8000"
    assert settings.cors_allow_origins == ["*"]
    assert settings.log_level == "INFO"
    assert settings.ogp_font_path is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PERSISTENCE_BACKEND", "SQLite")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("APP_URL", "https://todo.example/")
    monkeypatch.setenv("TWITTER_CLIENT_ID", " key ")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.persistence_backend == "sqlite"
    assert settings.cors_allow_origins == ["https://a.example", "https://b.example"]
    assert settings.app_url == "https://todo.example"
    assert settings.twitter_client_id == "key"
    assert settings.log_level == "DEBUG"


def test_unknown_backend_falls_back_to_memory(monkeypatch):
    monkeypatch.setenv("PERSISTENCE_BACKEND", "postgres")
    assert get_settings().persistence_backend == "memory"


def test_configure_logging_does_not_stack_handlers():
    logger = configure_logging("DEBUG")
    handlers = len(logger.handlers)
    configure_logging("WARNING")
    assert len(logger.handlers) == handlers
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.WARNING
    configure_logging("nonsense")
    assert logger.level == logging.INFO
