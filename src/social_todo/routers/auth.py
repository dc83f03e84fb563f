from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from starlette.responses import Response

from ..auth import IdentityProvider, get_identity_provider, login_session, logout_session
from ..services import UserService, get_user_service

router = APIRouter(tags=["auth"])


# PUBLIC_INTERFACE
@router.get("/login", summary="Log in", description="Redirect to the identity provider.")
async def login(request: Request, provider: IdentityProvider = Depends(get_identity_provider)) -> Response:
    redirect_uri = str(request.url_for("callback"))
    return await provider.authorize_redirect(request, redirect_uri)


# PUBLIC_INTERFACE
@router.get(
    "/login/callback",
    name="callback",
    status_code=status.HTTP_302_FOUND,
    summary="Login callback",
    description="Finish the provider handshake, find or create the user and start a session.",
)
async def login_callback(
    request: Request,
    provider: IdentityProvider = Depends(get_identity_provider),
    users: UserService = Depends(get_user_service),
) -> RedirectResponse:
    identity = await provider.fetch_external_identity(request)
    user = users.login(identity)
    login_session(request, user)
    return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)


# PUBLIC_INTERFACE
@router.post("/logout", status_code=status.HTTP_302_FOUND, summary="Log out")
def logout(request: Request) -> RedirectResponse:
    logout_session(request)
    return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
