# services/users/tests/conftest.py
"""
Minimal test configuration for users service tests.
"""

import sys
from pathlib import Path

import pytest


# Configure Python path for testing
def setup_python_path():
    """Set up Python path to allow imports from both service and shared libs."""
    project_root = Path(__file__).parent.parent.parent.parent.absolute()
    users_src = Path(__file__).parent.parent / "src"

    paths_to_add = [str(users_src), str(project_root)]
    for path in paths_to_add:
        if path not in sys.path:
            sys.path.insert(0, path)


# Set up paths immediately when module is imported
setup_python_path()

from users.data_service import UserDataService
from users.models import UserCreate


@pytest.fixture
def sample_users():
    """Payloads for three users in two cities."""
    return [
        UserCreate(
            name="Asha Sen",
            gender="female",
            email="Asha@Example.com",
            phone="9000000001",
            location="Kolkata",
        ),
        UserCreate(
            name="Rahul Das",
            gender="male",
            email="rahul@example.com",
            phone="9000000002",
            location="kolkata",
        ),
        UserCreate(
            name="Meera Iyer",
            gender="female",
            email="meera@example.com",
            phone="9000000003",
            location="Chennai",
        ),
    ]


@pytest.fixture
def users_file(tmp_path):
    """Path of a not-yet-existing users JSON file."""
    return tmp_path / "data" / "users.json"


@pytest.fixture
def user_service(users_file, sample_users):
    """UserDataService persisted to a temporary file and seeded with sample users."""
    service = UserDataService(str(users_file))
    for payload in sample_users:
        service.create_user(payload)
    return service
