"""
Authentication module - JWT access tokens and bcrypt password hashing.
"""

from common.auth.jwt_auth import JWTAuth
from common.auth.password_hasher import PasswordHasher, VerifyResult
from common.auth.dependencies import extract_bearer_token

__all__ = ["JWTAuth", "PasswordHasher", "VerifyResult", "extract_bearer_token"]
