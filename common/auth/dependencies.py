"""
Authorization header parsing shared by FastAPI auth dependencies.

Example:
    from fastapi import Header
    from common.auth import extract_bearer_token

    async def get_current_user_id(authorization: Optional[str] = Header(None)):
        token = extract_bearer_token(authorization)
        if not token:
            raise UnauthorizedException("Access token required")
        ...
"""

from typing import Optional


def extract_bearer_token(
    authorization: Optional[str],
    scheme: str = "Bearer",
) -> Optional[str]:
    """
    Extract the token from an Authorization header value.

    Args:
        authorization: Raw header value, or None when the header is absent
        scheme: Auth scheme prefix (default: Bearer), matched case-insensitively

    Returns:
        The token, or None if the header is missing, uses another scheme,
        or carries an empty token
    """
    if not authorization:
        return None

    parts = authorization.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != scheme.lower():
        return None

    token = parts[1].strip()
    return token or None
