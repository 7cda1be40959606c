"""Users service configuration."""

from typing import List, Optional

from libs.relay_shared.config import BaseServiceConfig
from pydantic import Field, field_validator


class UsersConfig(BaseServiceConfig):
    """Users service specific configuration."""

    # Service settings
    port: int = Field(3000, description="Port the users API listens on")

    # Data settings
    users_data_path: Optional[str] = Field(
        None,
        description="Path to the JSON file users are persisted to; in-memory only when unset",
    )

    # Shared secret accepted by /deleteUser
    delete_token: str = Field("1", description="Token required to delete a user by email")

    # CORS settings
    allowed_origins: List[str] = Field(default=["*"])

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_origins(cls, v):
        if isinstance(v, str):
            # Handle JSON-like string from env var
            if v.startswith("["):
                import json

                return json.loads(v)
            # Handle comma-separated string
            return [origin.strip() for origin in v.split(",")]
        return v
