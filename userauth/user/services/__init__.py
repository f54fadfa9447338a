"""
User services.
"""

from userauth.user.services.user_store import (
    UserStore,
    StoreResult,
    Created,
    Conflict,
    Unavailable,
    ValidationFailed,
)

__all__ = [
    "UserStore",
    "StoreResult",
    "Created",
    "Conflict",
    "Unavailable",
    "ValidationFailed",
]
