"""
Auth system pipeline functions.

Stateless orchestration logic for authentication flows. Services are
passed in by the router, so every pipeline can be exercised with stand-ins.
"""

import hmac
import logging
from datetime import datetime, timezone
from typing import List, Optional

from common.auth import JWTAuth, PasswordHasher, VerifyResult
from common.utils import NotFoundException, validate_password, validate_username
from userauth.auth.errors import (
    ConflictError,
    CredentialVerificationError,
    InvalidCredentialsError,
    StoreUnavailableError,
    ValidationError,
)
from userauth.user.services.user_store import (
    CREDENTIAL_FIELD,
    Conflict,
    Created,
    Unavailable,
    UserStore,
    ValidationFailed,
)

logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> str:
    """Trim and lowercase an email address."""
    return (email or "").strip().lower()


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    # Motor hands back naive datetimes that are UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def format_user_response(user: dict) -> dict:
    """Public identity fields; the credential never leaves this layer."""
    return {
        "id": str(user["_id"]),
        "username": user.get("username"),
        "email": user.get("email"),
        "createdAt": _format_timestamp(user.get("createdAt")),
    }


def format_user_summary(user: dict) -> dict:
    """Identity fields safe for listings: no email, no credential."""
    return {
        "id": str(user["_id"]),
        "username": user.get("username"),
        "createdAt": _format_timestamp(user.get("createdAt")),
    }


def _conflict_for(existing: dict, username: str) -> ConflictError:
    if existing.get("username") == username:
        return ConflictError("username")
    return ConflictError("email")


async def registration_pipeline(
    user_store: UserStore,
    password_hasher: PasswordHasher,
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
) -> dict:
    """
    Orchestrates the user registration flow.

    Args:
        user_store: Identity persistence
        password_hasher: For hashing the new password
        username: Requested username (trimmed here)
        email: Email address (trimmed and lowercased here)
        password: Plaintext password

    Returns:
        Public identity of the created user

    Raises:
        ValidationError: Missing field, short password, or bad username
        ConflictError: Username or email already registered
        StoreUnavailableError: Database unreachable
    """
    username = (username or "").strip()
    email = normalize_email(email)

    if not username or not email or not password:
        raise ValidationError("Username, email and password are required")

    is_valid, errors = validate_password(password)
    if not is_valid:
        raise ValidationError(errors[0])

    is_valid, errors = validate_username(username)
    if not is_valid:
        raise ValidationError(errors[0])

    # Best effort only; the unique indexes settle races at insert time
    existing = await user_store.find_by_username_or_email(username, email)
    if existing:
        conflict = _conflict_for(existing, username)
        logger.info(f"Registration conflict on {conflict.field}")
        raise conflict

    password_hash = await password_hasher.hash(password)
    logger.debug("Password hashed for new user")

    result = await user_store.create(username, email, password_hash)

    if isinstance(result, Created):
        logger.info(f"User registered: {result.user['_id']} ({email})")
        return format_user_response(result.user)
    if isinstance(result, Conflict):
        logger.info(f"Registration lost insert race on {result.field}")
        raise ConflictError(result.field)
    if isinstance(result, ValidationFailed):
        raise ValidationError("Validation failed", errors=result.errors)
    if isinstance(result, Unavailable):
        logger.error(f"Registration failed, store unavailable: {result.reason}")
        raise StoreUnavailableError()
    raise TypeError(f"Unhandled store result: {result!r}")


async def _verify_credential(
    password_hasher: PasswordHasher,
    user: dict,
    password: str,
) -> bool:
    stored = user[CREDENTIAL_FIELD]
    result = await password_hasher.verify(password, stored)

    if result is VerifyResult.MATCH:
        return True
    if result is VerifyResult.MISMATCH:
        return False

    # Stored value is not a hash: only out-of-band seeded data gets here
    logger.warning(f"Stored credential for user {user['_id']} is not a bcrypt hash")
    if isinstance(stored, str) and hmac.compare_digest(
        stored.encode("utf-8"), password.encode("utf-8")
    ):
        logger.warning(
            f"LEGACY PLAINTEXT CREDENTIAL accepted for user {user['_id']}; "
            "requires one-time rehash (scripts/rehash_legacy_passwords.py)"
        )
        return True

    logger.error(f"Credential verification failed for user {user['_id']}")
    raise CredentialVerificationError()


async def login_pipeline(
    user_store: UserStore,
    password_hasher: PasswordHasher,
    token_auth: JWTAuth,
    email: Optional[str],
    password: Optional[str],
) -> str:
    """
    Orchestrates the user login flow.

    Args:
        user_store: For user lookup
        password_hasher: For checking the password
        token_auth: For issuing the access token
        email: Email address
        password: Plaintext password

    Returns:
        Signed access token

    Raises:
        ValidationError: Email or password missing
        InvalidCredentialsError: Unknown email or wrong password
        CredentialVerificationError: Stored credential is unusable
        StoreUnavailableError: Database unreachable
    """
    email = normalize_email(email)
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = await user_store.find_by_email(email, include_credential=True)

    if not user:
        logger.info("Login rejected: no user for email")
        raise InvalidCredentialsError()

    if not user.get(CREDENTIAL_FIELD):
        logger.warning(f"Login rejected: user {user['_id']} has no stored credential")
        raise InvalidCredentialsError()

    if not await _verify_credential(password_hasher, user, password):
        logger.info(f"Login rejected: wrong password for user {user['_id']}")
        raise InvalidCredentialsError()

    token = await token_auth.create_token(str(user["_id"]))
    logger.info(f"User logged in: {user['_id']}")
    return token


async def profile_pipeline(user_store: UserStore, user_id: str) -> dict:
    """
    Resolve the authenticated identity.

    Raises:
        NotFoundException: Identity deleted since the token was issued
    """
    user = await user_store.find_by_id(user_id)
    if not user:
        raise NotFoundException(message="User not found", code="USER_NOT_FOUND")
    return format_user_response(user)


async def list_users_pipeline(user_store: UserStore) -> List[dict]:
    """List identities for maintenance use."""
    users = await user_store.list_all()
    return [format_user_summary(user) for user in users]


async def delete_user_pipeline(user_store: UserStore, email: str) -> dict:
    """
    Delete an identity by email.

    Returns:
        Username and email of the deleted identity

    Raises:
        NotFoundException: No identity with that email
    """
    deleted = await user_store.delete_by_email(normalize_email(email))
    if not deleted:
        raise NotFoundException(message="User not found", code="USER_NOT_FOUND")
    return {"username": deleted.get("username"), "email": deleted.get("email")}
