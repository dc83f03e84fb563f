from fastapi.testclient import TestClient

from social_todo.auth import TwitterIdentityProvider
from social_todo.main import create_app
from social_todo.repositories import InMemoryRepository

from conftest import make_settings


def test_default_provider_is_twitter():
    app = create_app(make_settings(), repository=InMemoryRepository())
    assert isinstance(app.state.identity_provider, TwitterIdentityProvider)


def test_login_without_credentials_is_unavailable():
    client = TestClient(create_app(make_settings(), repository=InMemoryRepository()))
    res = client.get("/login", follow_redirects=False)
    assert res.status_code == 503
    assert res.json() == {
        "error": "Service Unavailable",
        "message": "Social login is not configured",
        "detail": "Social login is not configured",
    }


def test_fresh_apps_do_not_share_state(provider):
    first = create_app(make_settings(), repository=InMemoryRepository(), identity_provider=provider)
    second = create_app(make_settings(), repository=InMemoryRepository(), identity_provider=provider)
    first_client = TestClient(first)
    assert first_client.get("/login/callback", follow_redirects=False).status_code == 302
    assert first.state.repository.get_user_by_nickname("test") is not None
    assert second.state.repository.get_user_by_nickname("test") is None
