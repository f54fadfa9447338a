"""
FastAPI router for Auth system endpoints.

Provides registration, login, profile and the maintenance endpoints for
listing and deleting users.
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, status

from common.auth import JWTAuth, PasswordHasher
from common.utils import success_response
from userauth.auth import pipelines
from userauth.auth.dependencies import (
    get_password_hasher,
    get_token_auth,
    get_user_store,
    require_auth,
)
from userauth.auth.schemas import (
    DeleteUserResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
    UserSummary,
)
from userauth.user.services.user_store import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
)
async def register(
    body: RegisterRequest,
    user_store: Annotated[UserStore, Depends(get_user_store)],
    password_hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
):
    """
    Register a new user account.
    """
    user = await pipelines.registration_pipeline(
        user_store=user_store,
        password_hasher=password_hasher,
        username=body.username,
        email=body.email,
        password=body.password,
    )
    return success_response(message="User registered successfully", user=user)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    user_store: Annotated[UserStore, Depends(get_user_store)],
    password_hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    token_auth: Annotated[JWTAuth, Depends(get_token_auth)],
):
    """
    Authenticate user and return access token.
    """
    token = await pipelines.login_pipeline(
        user_store=user_store,
        password_hasher=password_hasher,
        token_auth=token_auth,
        email=body.email,
        password=body.password,
    )
    return success_response(token=token)


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    user_id: Annotated[str, Depends(require_auth)],
    user_store: Annotated[UserStore, Depends(get_user_store)],
):
    """Get the authenticated user's profile."""
    return await pipelines.profile_pipeline(user_store, user_id)


@router.get("/users", response_model=List[UserSummary])
async def list_users(
    user_store: Annotated[UserStore, Depends(get_user_store)],
):
    """List all users without email or credential fields."""
    return await pipelines.list_users_pipeline(user_store)


@router.delete("/user/{email}", response_model=DeleteUserResponse)
async def delete_user(
    email: str,
    user_store: Annotated[UserStore, Depends(get_user_store)],
):
    """Delete a user by email."""
    deleted = await pipelines.delete_user_pipeline(user_store, email)
    logger.info(f"Maintenance deletion for {deleted['email']}")
    return success_response(message="User deleted successfully", deletedUser=deleted)
