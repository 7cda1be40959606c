# services/chat/src/chat/collaborators.py
"""
HTTP client for the users service endpoints the chat tools call.

Responses are returned as decoded JSON, unmodified.
"""

from typing import Any, Dict, Optional

import httpx
from libs.relay_shared.logging import get_logger

from .exceptions import ToolExecutionError

logger = get_logger(__name__)


class UsersApiClient:
    """Thin async wrapper around the users service lookup endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )

    async def _get(self, path: str, params: Dict[str, str]) -> Any:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"{path} returned {e.response.status_code}")
            raise ToolExecutionError(
                f"{path} failed with status {e.response.status_code}: {e.response.text}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Request to {self.base_url}{path} failed: {e}")
            raise ToolExecutionError(f"{path} request failed: {e}") from e

    async def get_weather(self, city: str) -> Any:
        return await self._get("/getWeatherDetails", {"city": city})

    async def get_users_by_city(self, city: str) -> Any:
        return await self._get("/getUserByCity", {"city": city})

    async def delete_user(self, email: str, token: str) -> Any:
        return await self._get("/deleteUser", {"email": email, "token": token})

    async def aclose(self) -> None:
        await self._client.aclose()
