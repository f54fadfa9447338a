"""
Standard API response helpers.

Provides consistent response formatting for success and error cases.
Payload fields sit at the top level of the body so clients can read
`token`, `user`, etc. directly.

Example:
    from common.utils import success_response, error_response

    @app.post("/login")
    async def login(...):
        return success_response(token=token)
"""

from typing import Any, Optional, Dict


def success_response(
    message: Optional[str] = None,
    **payload: Any,
) -> Dict[str, Any]:
    """
    Create a standard success response.

    Args:
        message: Optional success message
        **payload: Response fields merged into the top-level body

    Returns:
        Dictionary with success=True, optional message, and payload fields
    """
    response: Dict[str, Any] = {"success": True}

    if message:
        response["message"] = message

    response.update(payload)
    return response


def error_response(
    message: str,
    code: Optional[str] = None,
    details: Optional[Any] = None,
    errors: Optional[list] = None,
) -> Dict[str, Any]:
    """
    Create a standard error response.

    Args:
        message: Human-readable error message
        code: Machine-readable error code (e.g., "USER_NOT_FOUND")
        details: Additional error details
        errors: List of specific errors (for validation errors)

    Returns:
        Dictionary with success=False and error info
    """
    response: Dict[str, Any] = {"success": False, "message": message}

    if code:
        response["code"] = code

    if details is not None:
        response["details"] = details

    if errors:
        response["errors"] = errors

    return response
