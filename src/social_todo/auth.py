from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from authlib.integrations.starlette_client import OAuth
from fastapi import Depends, HTTPException, Request, status
from starlette.responses import Response

from .models import UserEntity
from .services import UserService, get_user_service
from .settings import Settings

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class ExternalIdentity:
    """Profile returned by the identity provider after a successful login."""

    external_id: str
    nickname: str
    name: str
    avatar_url: Optional[str] = None


# PUBLIC_INTERFACE
class IdentityProvider(ABC):
    """Contract for the external social login provider."""

    @abstractmethod
    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Response:
        """Return the response that sends the browser to the provider's consent page."""

    @abstractmethod
    async def fetch_external_identity(self, request: Request) -> ExternalIdentity:
        """Complete the handshake on the callback request and return the caller's identity."""


class TwitterIdentityProvider(IdentityProvider):
    """
    Twitter login over OAuth 1.0a using Authlib's Starlette client.

    The temporary request token lives in the session, so SessionMiddleware
    must be installed.
    """

    def __init__(self, settings: Settings) -> None:
        self._configured = bool(settings.twitter_client_id and settings.twitter_client_secret)
        if not self._configured:
            logger.warning("TWITTER_CLIENT_ID/TWITTER_CLIENT_SECRET not set; social login is disabled")
        self._oauth = OAuth()
        self._oauth.register(
            name="twitter",
            client_id=settings.twitter_client_id,
            client_secret=settings.twitter_client_secret,
            request_token_url="https://api.twitter.com/oauth/request_token",
            access_token_url="https://api.twitter.com/oauth/access_token",
            authorize_url="https://api.twitter.com/oauth/authenticate",
            api_base_url="https://api.twitter.com/1.1/",
        )

    def _client(self):
        if not self._configured:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Social login is not configured",
            )
        return self._oauth.create_client("twitter")

    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Response:
        return await self._client().authorize_redirect(request, redirect_uri)

    async def fetch_external_identity(self, request: Request) -> ExternalIdentity:
        client = self._client()
        token = await client.authorize_access_token(request)
        resp = await client.get("account/verify_credentials.json", token=token)
        resp.raise_for_status()
        profile = resp.json()
        return ExternalIdentity(
            external_id=str(profile["id_str"]),
            nickname=profile["screen_name"],
            name=profile.get("name") or profile["screen_name"],
            avatar_url=profile.get("profile_image_url_https"),
        )


# PUBLIC_INTERFACE
def get_identity_provider(request: Request) -> IdentityProvider:
    """FastAPI dependency returning the app's identity provider."""
    return request.app.state.identity_provider


# PUBLIC_INTERFACE
def login_session(request: Request, user: UserEntity) -> None:
    """Bind the session to ``user``."""
    request.session.clear()
    request.session[SESSION_USER_KEY] = user["id"]


# PUBLIC_INTERFACE
def logout_session(request: Request) -> None:
    request.session.clear()


# PUBLIC_INTERFACE
async def get_optional_user(
    request: Request, users: UserService = Depends(get_user_service)
) -> Optional[UserEntity]:
    """
    Return the logged-in user, or None for anonymous callers.

    A session pointing at a user that no longer exists is cleared.
    """
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        return None
    user = users.get(int(user_id))
    if user is None:
        request.session.clear()
    return user


# PUBLIC_INTERFACE
async def get_current_user(user: Optional[UserEntity] = Depends(get_optional_user)) -> UserEntity:
    """
    Require a logged-in user.

    Raises:
        HTTPException(401) for anonymous callers.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user
