# libs/relay_shared/errors.py
"""
HTTPException builders with a uniform ErrorResponse body.

Every helper returns the exception instead of raising it, so call sites read
``raise not_found_error("user", user_id)``.
"""

from typing import Any, Dict, Optional, Union

from fastapi import HTTPException, status

from .models import ErrorResponse


def _http_error(
    status_code: int,
    error: str,
    detail: str,
    headers: Optional[Dict[str, str]] = None,
) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=ErrorResponse(error=error, detail=detail).model_dump(),
        headers=headers,
    )


def validation_error(
    detail: str = "Invalid input parameters",
    field: Optional[str] = None,
    value: Optional[Any] = None,
) -> HTTPException:
    """
    422 for input that parsed but is not acceptable.

    Args:
        detail: What is wrong with the input
        field: Offending field, appended to the message when given
        value: Offending value, appended after the field
    """
    if field:
        detail = f"{detail} for field '{field}'"
        if value is not None:
            detail = f"{detail} with value '{value}'"
    return _http_error(422, "Validation Error", detail)


def not_found_error(
    entity_type: str, entity_id: Union[str, int], detail: Optional[str] = None
) -> HTTPException:
    """404 naming the missing entity, e.g. "User with ID 'abc' not found"."""
    message = f"{entity_type.title()} with ID '{entity_id}' not found"
    if detail:
        message = f"{message}. {detail}"
    return _http_error(status.HTTP_404_NOT_FOUND, "Not Found", message)


def service_error(
    message: str = "Internal service error",
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> HTTPException:
    return _http_error(status_code, "Service Error", message)


def unauthorized_error(message: str = "Authentication required") -> HTTPException:
    """401 for a missing or wrong shared-secret token."""
    return _http_error(
        status.HTTP_401_UNAUTHORIZED,
        "Unauthorized",
        message,
        headers={"WWW-Authenticate": "Bearer"},
    )
