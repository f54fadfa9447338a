"""
Common library for reusable infrastructure components.

This package provides generic modules that can be used across projects:

- database: Async MongoDB connection with Motor
- auth: JWT access tokens and bcrypt password hashing
- utils: Standard responses, exceptions, credential validation
- config: Base settings class
"""

from common.database import MongoDB
from common.auth import JWTAuth, PasswordHasher, VerifyResult, extract_bearer_token
from common.utils import (
    success_response,
    error_response,
    APIException,
    BadRequestException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    InternalServerException,
    ServiceUnavailableException,
    validate_password,
    validate_username,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Auth
    "JWTAuth",
    "PasswordHasher",
    "VerifyResult",
    "extract_bearer_token",
    # Utils
    "success_response",
    "error_response",
    "APIException",
    "BadRequestException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "InternalServerException",
    "ServiceUnavailableException",
    "validate_password",
    "validate_username",
    # Config
    "BaseAppSettings",
]
