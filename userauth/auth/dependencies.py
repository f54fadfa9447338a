"""
FastAPI dependencies for Auth system.

Services are built once at startup by init_auth_services() and are
read-only afterwards.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from common.auth import JWTAuth, PasswordHasher, extract_bearer_token
from common.database import MongoDB
from common.config import BaseAppSettings
from userauth.auth.errors import AuthRequiredError, InvalidTokenError
from userauth.user.services.user_store import UserStore

logger = logging.getLogger(__name__)

_password_hasher: PasswordHasher | None = None
_token_auth: JWTAuth | None = None
_user_store: UserStore | None = None


def init_auth_services(database: MongoDB, settings: BaseAppSettings) -> None:
    """
    Initialize auth services with database and settings.

    Called once at application startup.

    Args:
        database: Connected (or connecting) MongoDB manager
        settings: Application settings; JWT_SECRET must be set

    Raises:
        ValueError: If JWT_SECRET is missing
    """
    global _password_hasher, _token_auth, _user_store

    _token_auth = JWTAuth(
        secret=settings.JWT_SECRET or "",
        algorithm=settings.JWT_ALGORITHM,
        access_token_expire_minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    _password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    _user_store = UserStore(
        db=database.db,
        is_available=database.is_available,
        on_connection_lost=database.mark_unavailable,
    )
    logger.info("Auth services initialized")


def get_password_hasher() -> PasswordHasher:
    """Get password hasher."""
    if _password_hasher is None:
        raise RuntimeError("Auth services not initialized. Call init_auth_services first.")
    return _password_hasher


def get_token_auth() -> JWTAuth:
    """Get JWT token service."""
    if _token_auth is None:
        raise RuntimeError("Auth services not initialized. Call init_auth_services first.")
    return _token_auth


def get_user_store() -> UserStore:
    """Get user store."""
    if _user_store is None:
        raise RuntimeError("Auth services not initialized. Call init_auth_services first.")
    return _user_store


async def require_auth(
    request: Request,
    token_auth: Annotated[JWTAuth, Depends(get_token_auth)],
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> str:
    """
    Dependency that requires a valid bearer token.

    Attaches the user ID to request.state.user_id and returns it.

    Usage:
        @router.get("/protected")
        async def protected_route(user_id: Annotated[str, Depends(require_auth)]):
            return {"user_id": user_id}

    Raises:
        AuthRequiredError: No bearer token in the Authorization header
        InvalidTokenError: Token failed signature or expiry checks
    """
    token = extract_bearer_token(authorization)
    if not token:
        raise AuthRequiredError()

    try:
        user_id = await token_auth.verify_token(token)
    except ValueError as e:
        logger.debug(f"Token rejected: {e}")
        raise InvalidTokenError()

    request.state.user_id = user_id
    return user_id
