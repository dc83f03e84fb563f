from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .auth import IdentityProvider, TwitterIdentityProvider
from .errors import TodoAppError
from .logging_config import configure_logging
from .repositories import Repository, build_repository
from .routers import auth as auth_router
from .routers import home as home_router
from .routers import todos as todos_router
from .routers import users as users_router
from .settings import DEFAULT_SESSION_SECRET, Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "home", "description": "Dashboard with near-due notice."},
    {"name": "auth", "description": "Social login via the identity provider."},
    {"name": "users", "description": "User profiles and their Todo lists."},
    {
        "name": "todos",
        "description": "Todo lifecycle: create, status changes, deletion, deadline view and preview image.",
    },
]


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[Repository] = None,
    identity_provider: Optional[IdentityProvider] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Defaults to get_settings() (environment).
        repository: Storage backend; built from settings when omitted.
        identity_provider: Social login provider; Twitter when omitted.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Social Todo",
        description="Personal Todo lists with social login, deadline tracking and shareable overdue cards.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings
    app.state.repository = repository or build_repository(settings)
    app.state.identity_provider = identity_provider or TwitterIdentityProvider(settings)

    if settings.session_secret == DEFAULT_SESSION_SECRET:
        logger.warning("SESSION_SECRET is not set; using an insecure development key")

    # Configure CORS based on settings (CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SessionMiddleware, secret_key=settings.session_secret, same_site="lax")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """
        Give HTTPException (401, 503, routing 404/405) the same body shape as
        the other errors. The error name is the status phrase, e.g. "Unauthorized".
        """
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": HTTPStatus(exc.status_code).phrase,
                "message": str(exc.detail),
                "detail": jsonable_encoder(exc.detail),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(TodoAppError)
    async def domain_exception_handler(request: Request, exc: TodoAppError) -> JSONResponse:
        """
        Map NotOwner/NotFound/Conflict/ValidationFailed to 403/404/409/422 with
        the same body shape as request validation errors.
        """
        logger.info("%s on %s: %s", exc.kind, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.kind, "message": exc.message, "detail": exc.detail},
        )

    # PUBLIC_INTERFACE
    @app.get("/health", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.persistence_backend}

    app.include_router(home_router.router)
    app.include_router(auth_router.router)
    app.include_router(users_router.router)
    app.include_router(todos_router.router)
    return app
