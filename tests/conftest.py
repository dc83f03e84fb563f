from __future__ import annotations

from datetime import date

import pytest
from fastapi import Request
from fastapi.responses import RedirectResponse
from fastapi.testclient import TestClient

from social_todo.auth import ExternalIdentity, IdentityProvider, get_identity_provider
from social_todo.clock import get_today
from social_todo.main import create_app
from social_todo.repositories import InMemoryRepository
from social_todo.settings import Settings

TODAY = date(2025, 6, 15)

OWNER = ExternalIdentity(
    external_id="1111111",
    nickname="test",
    name="testuser",
    avatar_url="https://api.adorable.io/avatars/285/abott@adorable.png",
)
STRANGER = ExternalIdentity(
    external_id="2222222",
    nickname="stranger",
    name="someone else",
    avatar_url=None,
)


class FakeIdentityProvider(IdentityProvider):
    """Hands out whatever identity the test assigns, no network involved."""

    def __init__(self, identity: ExternalIdentity = OWNER) -> None:
        self.identity = identity
        self.redirect_uris: list[str] = []

    async def authorize_redirect(self, request: Request, redirect_uri: str) -> RedirectResponse:
        self.redirect_uris.append(redirect_uri)
        return RedirectResponse(url="https://provider.example/authorize", status_code=302)

    async def fetch_external_identity(self, request: Request) -> ExternalIdentity:
        return self.identity


def make_settings(**overrides) -> Settings:
    values = dict(
        persistence_backend="memory",
        sqlite_db_path="./data/test.db",
        cors_allow_origins=["*"],
        session_secret="test-secret",
        twitter_client_id=None,
        twitter_client_secret=None,
        app_url="http://testserver",
        log_level="WARNING",
        ogp_font_path=None,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def repo() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def app(repo, provider):
    app = create_app(make_settings(), repository=repo)
    app.dependency_overrides[get_identity_provider] = lambda: provider
    app.dependency_overrides[get_today] = lambda: TODAY
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def login(client: TestClient, provider: FakeIdentityProvider, identity: ExternalIdentity = OWNER) -> None:
    provider.identity = identity
    res = client.get("/login/callback", follow_redirects=False)
    assert res.status_code == 302
    assert res.headers["location"] == "/"


@pytest.fixture
def owner(client, provider, repo):
    """Log the client in as OWNER and return the stored user."""
    login(client, provider, OWNER)
    user = repo.get_user_by_nickname(OWNER.nickname)
    assert user is not None
    return user
