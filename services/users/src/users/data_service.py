"""
User data service implementation.

This module provides the UserDataService class which keeps user records in
memory and, when a path is configured, persists them to a JSON file after
every write.
"""

import json
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from libs.relay_shared.logging import get_logger

from .models import User, UserCreate, UserUpdate

logger = get_logger(__name__)

# Reference temperatures served by /getWeatherDetails
HOT_CITIES = {"kolkata": "37c"}
DEFAULT_TEMPERATURE = "50c"


class UserDataService:
    """
    Service for handling user data operations.
    """

    def __init__(self, data_path: Optional[str] = None):
        """
        Initialize the service, loading existing users when a file is configured.

        Args:
            data_path: Optional path to the users JSON file
        """
        self._users: Dict[str, User] = {}
        self._path: Optional[Path] = Path(data_path) if data_path else None

        if self._path:
            logger.info(f"Initializing UserDataService with data from {self._path}")
            self._load()
        else:
            logger.info("UserDataService initialized with in-memory storage only")

    def _load(self) -> None:
        if not self._path.exists():
            return

        try:
            with open(self._path, "r") as f:
                records = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Failed to load users from {self._path}: {e}")
            return

        for record in records:
            user = User.model_validate(record)
            self._users[user.id] = user
        logger.info(f"Loaded {len(self._users)} users")

    def _commit(self, users: Dict[str, User]) -> None:
        """Write users to the data file, then serve them.

        The served state is left untouched when the write fails.
        """
        if self._path:
            os.makedirs(self._path.parent, exist_ok=True)
            payload = [user.model_dump(mode="json") for user in users.values()]
            with open(self._path, "w") as f:
                json.dump(payload, f, indent=2)
        self._users = users

    def _without(self, user_id: str) -> Dict[str, User]:
        return {key: user for key, user in self._users.items() if key != user_id}

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    # --- CRUD -------------------------------------------------------------

    def count(self) -> int:
        return len(self._users)

    def list_users(self, limit: int = 50, offset: int = 0) -> List[User]:
        users = list(self._users.values())
        return users[offset : offset + limit]

    def get_user(self, user_id: str) -> User:
        """
        Fetch one user.

        Raises:
            ValueError: If no user has this id
        """
        user = self._users.get(user_id)
        if user is None:
            raise ValueError(f"User {user_id} not found")
        return user

    def create_user(self, payload: UserCreate) -> User:
        now = self._now()
        user = User(
            id=uuid.uuid4().hex,
            created_at=now,
            updated_at=now,
            **payload.model_dump(),
        )
        self._commit({**self._users, user.id: user})
        logger.info(f"Created user {user.id}")
        return user

    def update_user(self, user_id: str, payload: UserUpdate) -> User:
        """
        Apply the fields present in payload to an existing user.

        Raises:
            ValueError: If no user has this id
        """
        current = self.get_user(user_id)
        changes = payload.model_dump(exclude_unset=True)
        updated = current.model_copy(update={**changes, "updated_at": self._now()})
        self._commit({**self._users, user_id: updated})
        return updated

    def delete_user(self, user_id: str) -> None:
        """
        Remove a user by id.

        Raises:
            ValueError: If no user has this id
        """
        self.get_user(user_id)
        self._commit(self._without(user_id))
        logger.info(f"Deleted user {user_id}")

    # --- Lookups used by the chat tools ----------------------------------

    def get_users_by_city(self, city: str) -> List[User]:
        location = city.strip().lower()
        return [user for user in self._users.values() if user.location == location]

    def delete_by_email(self, email: str) -> int:
        """
        Delete the first user with this email.

        Returns:
            Number of deleted users (0 or 1)
        """
        address = email.strip().lower()
        for user_id, user in self._users.items():
            if user.email == address:
                self._commit(self._without(user_id))
                logger.info(f"Deleted user {user_id} by email")
                return 1
        return 0

    @staticmethod
    def weather_for(city: str) -> str:
        return HOT_CITIES.get(city.strip().lower(), DEFAULT_TEMPERATURE)
