# services/users/src/users/models.py
"""
User service models.

Users are plain contact records looked up by city and deleted by email.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _lower(value: Optional[str]) -> Optional[str]:
    return value.strip().lower() if isinstance(value, str) else value


class UserBase(BaseModel):
    """Fields shared by every user payload."""

    name: Optional[str] = Field(None, description="Display name", examples=["Asha Roy"])
    gender: Optional[str] = Field(None, description="Self-described gender")
    email: Optional[str] = Field(
        None,
        description="Contact email, stored lower-cased",
        examples=["asha@example.com"],
    )
    phone: Optional[str] = Field(None, description="Contact phone number")
    location: Optional[str] = Field(
        None,
        description="City the user lives in, stored lower-cased",
        examples=["kolkata"],
    )

    @field_validator("email", "location")
    @classmethod
    def normalize_lookup_fields(cls, v: Optional[str]) -> Optional[str]:
        return _lower(v)


class UserCreate(UserBase):
    """Payload for POST /users."""


class UserUpdate(UserBase):
    """Payload for PUT /users/{user_id}; only fields that are sent are changed."""


class User(UserBase):
    """A stored user record."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="System-generated user identifier")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: datetime = Field(..., description="Last modification timestamp (UTC)")


class WeatherReport(BaseModel):
    """Response of /getWeatherDetails."""

    temp: str = Field(..., description="Temperature with unit suffix", examples=["37c"])


class DeleteResult(BaseModel):
    """Outcome of a delete-by-email, shaped like a document-store deleteOne result."""

    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    deleted_count: int = Field(..., alias="deletedCount")
