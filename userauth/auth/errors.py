"""
Error taxonomy for the authentication flow.

Each error is an APIException, so raising one anywhere in a request
produces the matching status code and a JSON body with a message.
"""

from typing import List, Optional

from common.utils.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    InternalServerException,
    ServiceUnavailableException,
    UnauthorizedException,
)


class ValidationError(BadRequestException):
    """400 - Missing or malformed input."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message=message, code="VALIDATION_ERROR")
        self.errors = errors or []


class ConflictError(ConflictException):
    """409 - Username or email already taken."""

    FIELD_MESSAGES = {
        "username": "Username already exists",
        "email": "Email already exists",
    }

    def __init__(self, field: str):
        self.field = field
        super().__init__(
            message=self.FIELD_MESSAGES.get(field, f"{field.capitalize()} already exists"),
            code=f"{field.upper()}_EXISTS",
        )


class AuthRequiredError(UnauthorizedException):
    """401 - No bearer token presented."""

    def __init__(self):
        super().__init__(message="Access token required", code="AUTH_REQUIRED")


class InvalidTokenError(ForbiddenException):
    """403 - Token malformed, tampered with, or expired."""

    def __init__(self):
        super().__init__(message="Invalid or expired token", code="INVALID_TOKEN")


class InvalidCredentialsError(UnauthorizedException):
    """401 - Unknown email or wrong password; deliberately does not say which."""

    def __init__(self):
        super().__init__(message="Invalid credentials", code="INVALID_CREDENTIALS")


class CredentialVerificationError(InternalServerException):
    """500 - Stored credential could not be checked at all."""

    def __init__(self):
        super().__init__(message="Password verification failed", code="VERIFICATION_FAILED")


class StoreUnavailableError(ServiceUnavailableException):
    """503 - The user store cannot be reached."""

    def __init__(self):
        super().__init__(
            message="Database connection not available. Please try again later.",
            code="DATABASE_UNAVAILABLE",
        )


class UnsupportedMediaError(BadRequestException):
    """400 - Upload is not an image."""

    def __init__(self):
        super().__init__(message="Only image files are allowed!", code="INVALID_FILE_TYPE")


class PayloadTooLargeError(BadRequestException):
    """400 - Upload exceeds the size cap."""

    def __init__(self, max_bytes: int):
        megabytes = max_bytes // (1024 * 1024)
        super().__init__(
            message=f"File size too large. Maximum size is {megabytes}MB.",
            code="FILE_TOO_LARGE",
        )
