# libs/relay_shared/models.py
"""
Response and query models shared by the chat and users services.
"""

from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


## PAGINATION ##


class PaginationParams(BaseModel):
    """Query parameters of list endpoints."""

    limit: int = Field(50, ge=1, le=200, description="Page size")
    offset: int = Field(0, ge=0, description="Index of the first item")


class PaginatedResponse(BaseModel, Generic[T]):
    """
    One page of a list endpoint.

    Request the next page with offset + limit until it reaches total_count.
    """

    items: List[T]
    total_count: int = Field(..., description="Number of items across all pages")
    limit: int
    offset: int


## ERRORS ##


class ErrorResponse(BaseModel):
    """
    Body carried in the `detail` of every HTTPException the services raise.

    Example:
        {"error": "Not Found", "detail": "User with ID 'abc123' not found"}
    """

    error: str = Field(..., description="Short error category")
    detail: Optional[str] = Field(None, description="Message for the caller")


## HEALTH ##


class HealthStatus(str, Enum):
    OK = "ok"
    ERROR = "error"


class HealthResponse(BaseModel):
    """
    Body of the users service /health endpoint.

    Example:
        {"status": "ok", "version": "1.0.0", "details": {"user_count": 12}}
    """

    status: HealthStatus
    version: str
    details: Dict[str, Any] = Field(default_factory=dict)
