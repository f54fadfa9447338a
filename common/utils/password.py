"""
Credential field validation.

Configurable password and username checks returning every failed rule,
so callers decide whether to report the first error or all of them.

Example:
    from common.utils import validate_password, validate_username

    is_valid, errors = validate_password("abc")
    if not is_valid:
        print("Password errors:", errors)

    is_valid, errors = validate_username("alice_1")
"""

import re
from typing import List, Tuple

# Letters, digits, whitespace, hyphens and underscores
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-_]+$")


def validate_password(
    password: str,
    min_length: int = 6,
    require_uppercase: bool = False,
    require_lowercase: bool = False,
    require_digit: bool = False,
) -> Tuple[bool, List[str]]:
    """
    Validate password strength.

    Args:
        password: The password to validate
        min_length: Minimum password length
        require_uppercase: Require at least one uppercase letter
        require_lowercase: Require at least one lowercase letter
        require_digit: Require at least one digit

    Returns:
        Tuple of (is_valid: bool, errors: List[str])

    Examples:
        >>> validate_password("abc")
        (False, ['Password must be at least 6 characters long'])

        >>> validate_password("secret1")
        (True, [])
    """
    errors: List[str] = []

    if len(password) < min_length:
        errors.append(f"Password must be at least {min_length} characters long")

    if require_uppercase and not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")

    if require_lowercase and not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")

    if require_digit and not re.search(r"\d", password):
        errors.append("Password must contain at least one digit")

    return len(errors) == 0, errors


def validate_username(
    username: str,
    min_length: int = 3,
    max_length: int = 50,
) -> Tuple[bool, List[str]]:
    """
    Validate a (trimmed) username.

    Args:
        username: The username to validate
        min_length: Minimum length
        max_length: Maximum length

    Returns:
        Tuple of (is_valid: bool, errors: List[str])
    """
    errors: List[str] = []

    if len(username) < min_length or len(username) > max_length:
        errors.append(
            f"Username must be between {min_length} and {max_length} characters long"
        )

    if not USERNAME_PATTERN.match(username):
        errors.append(
            "Username can only contain letters, numbers, spaces, hyphens, and underscores"
        )

    return len(errors) == 0, errors
