"""
JWT access tokens.

Stateless bearer tokens signed with a shared secret. Validity is fully
determined by the signature and the expiry claim; nothing is stored
server-side.

Example:
    auth = JWTAuth(
        secret="your-secret-key",
        access_token_expire_minutes=60,
    )

    token = await auth.create_token(user_id)
    assert await auth.verify_token(token) == user_id
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import jwt, JWTError

INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class JWTAuth:
    """
    Issues and verifies signed, time-bounded access tokens.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 60,
    ):
        """
        Initialize JWT auth provider.

        Args:
            secret: Secret key for JWT signing (keep this secure!)
            algorithm: JWT algorithm (default: HS256)
            access_token_expire_minutes: Token expiration time

        Raises:
            ValueError: If the secret is empty
        """
        if not secret:
            raise ValueError("JWT secret must be set")

        self.secret = secret
        self.algorithm = algorithm
        self.access_token_expire = timedelta(minutes=access_token_expire_minutes)

    async def create_token(
        self,
        user_id: str,
        **claims: Any,
    ) -> str:
        """Create a JWT token for the user."""
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": user_id,
            # Clients of the earlier Express deployment read userId
            "userId": user_id,
            "iat": now,
            "exp": now + self.access_token_expire,
            **claims,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    async def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry and return the decoded claims.

        Raises:
            ValueError: For any malformed, tampered, or expired token
        """
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
            )
        except JWTError:
            # Same message for every failure so callers learn nothing about which check failed
            raise ValueError(INVALID_TOKEN_MESSAGE)

    async def verify_token(self, token: str) -> str:
        """
        Verify a token and return the user ID it was issued for.

        Raises:
            ValueError: If the token is invalid, expired, or has no subject
        """
        payload = await self.decode_token(token)
        user_id = payload.get("sub") or payload.get("userId")
        if not user_id or not isinstance(user_id, str):
            raise ValueError(INVALID_TOKEN_MESSAGE)
        return user_id
