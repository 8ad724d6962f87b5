"""FastAPI dependency implementations."""

from authlib.jose import JoseError, JsonWebToken
from fastapi import Depends, HTTPException, Request, status
from loguru import logger

from src.library.api.http.app_data import ApplicationDependencies
from src.library.core.services import (
    BackgroundTaskPool,
    DbSessionService,
    SearchClientService,
)
from src.library.core.services.entity_service import BookService, MemberService
from src.library.runtime.config.config_data import ConfigData


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_app_config(request: Request) -> ConfigData:
    """Get the configuration the application was built with."""
    return get_app_dependencies(request).config


def get_database_service(request: Request) -> DbSessionService:
    """Get the database session service instance."""
    return get_app_dependencies(request).database_service


def get_search_service(request: Request) -> SearchClientService:
    """Get the Elasticsearch client service instance."""
    return get_app_dependencies(request).search_service


def get_task_pool(request: Request) -> BackgroundTaskPool:
    """Get the background task pool instance."""
    return get_app_dependencies(request).task_pool


def get_book_service(request: Request) -> BookService:
    """Get the Book service instance."""
    return get_app_dependencies(request).book_service


def get_member_service(request: Request) -> MemberService:
    """Get the Member service instance."""
    return get_app_dependencies(request).member_service


async def require_bearer_token(
    request: Request,
    config: ConfigData = Depends(get_app_config),
) -> None:
    """Reject writes without a valid HMAC-signed bearer token.

    Does nothing unless ``auth.enabled`` is set. Verified claims are stored
    on ``request.state.claims``.
    """
    auth_cfg = config.auth
    if not auth_cfg.enabled:
        return

    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme != "Bearer" or not token or " " in token:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: invalid token format",
        )

    jwt = JsonWebToken(auth_cfg.allowed_algorithms)
    try:
        claims = jwt.decode(token, auth_cfg.jwt_secret)
    except (JoseError, ValueError) as exc:
        logger.bind(error_type=type(exc).__name__).info("auth.token_rejected")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: cannot parse token",
        ) from exc

    try:
        claims.validate()
    except JoseError as exc:
        logger.bind(error_type=type(exc).__name__).info("auth.claims_rejected")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: invalid token claims",
        ) from exc

    request.state.claims = dict(claims)
