# services/chat/tests/conftest.py
# Root level fixtures shared by all tests

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest


# Set up Python path for testing
def setup_python_path():
    """Set up Python path to allow imports from both service and shared libs."""
    tests_root = Path(__file__).parent.absolute()
    chat_src = tests_root.parent / "src"
    project_root = tests_root.parent.parent.parent.absolute()

    paths_to_add = [str(tests_root), str(chat_src), str(project_root)]
    for path in paths_to_add:
        if path not in sys.path:
            sys.path.insert(0, path)


setup_python_path()

# Import after path setup
from chat.collaborators import UsersApiClient
from chat.config import ChatConfig
from chat.exceptions import ToolExecutionError
from chat.tools import build_registry
from helpers import FakeProvider

# ============== Test Data ==============

KOLKATA_USERS = [
    {
        "_id": "6650f1c2a1b2c3d4e5f60718",
        "name": "Asha Sen",
        "gender": "female",
        "email": "asha@example.com",
        "phone": "9000000001",
        "location": "kolkata",
    },
    {
        "_id": "6650f1c2a1b2c3d4e5f60719",
        "name": "Rahul Das",
        "gender": "male",
        "email": "rahul@example.com",
        "phone": "9000000002",
        "location": "kolkata",
    },
]


# ============== Common Fixtures ==============


@pytest.fixture
def users_client():
    """UsersApiClient double answering like the users service."""
    client = MagicMock(spec=UsersApiClient)
    client.get_weather = AsyncMock(return_value={"temp": "37c"})
    client.get_users_by_city = AsyncMock(return_value=KOLKATA_USERS)
    client.delete_user = AsyncMock(
        side_effect=ToolExecutionError(
            '/deleteUser failed with status 401: {"detail":"Unauthorized"}'
        )
    )
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def registry(users_client):
    """The production tool registry backed by the users client double."""
    return build_registry(users_client)


@pytest.fixture
def fake_provider(registry):
    """Provider answering every request with plain text."""
    return FakeProvider(registry)


@pytest.fixture
def chat_config():
    """Configuration that never reaches a real model or users service."""
    return ChatConfig(
        llm_provider="ollama",
        users_api_url="http://users.test",
        max_message_length=200,
        provider_timeout=5,
    )
