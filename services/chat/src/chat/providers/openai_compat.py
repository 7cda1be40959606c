"""OpenAI-compatible LLM provider.

Works with any OpenAI API-compatible endpoint using native tool calling.
"""

import json
from typing import Any, Dict, List, Optional, Sequence

from libs.relay_shared.logging import get_logger
from openai import AsyncOpenAI

from ..config import LLMSettings
from ..exceptions import MalformedToolCallError, ProviderConfigError
from ..models import ConversationTurn, ModelReply, Role, ToolCallRequest
from ..prompting import render_system_prompt
from ..tools import ToolRegistry
from .base import LLMProvider

logger = get_logger(__name__)

_ROLES = {Role.USER: "user", Role.ASSISTANT: "assistant"}


class OpenAICompatibleProvider(LLMProvider):
    """OpenAI-compatible provider with native function calling."""

    display_name = "OpenAI"

    def __init__(self, settings: LLMSettings, registry: ToolRegistry) -> None:
        """Initialize the OpenAI-compatible provider.

        Raises:
            ProviderConfigError: If no API key is configured.
        """
        super().__init__(settings, registry)

        if settings.api_key is None or not settings.api_key.get_secret_value():
            raise ProviderConfigError("OPENAI_API_KEY environment variable is required")

        client_kwargs: Dict[str, Any] = {"api_key": settings.api_key.get_secret_value()}
        if settings.base_url:
            client_kwargs["base_url"] = settings.base_url

        self._client = AsyncOpenAI(**client_kwargs)
        self._system_prompt = render_system_prompt()

    def _convert_tools(self) -> List[Dict[str, Any]]:
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.json_schema(),
                },
            }
            for tool in self._registry.descriptors
        ]

    def _extract_tool_calls(self, tool_calls: Optional[List[Any]]) -> List[ToolCallRequest]:
        result: List[ToolCallRequest] = []
        for tool_call in tool_calls or []:
            try:
                args = json.loads(tool_call.function.arguments or "{}")
                if not isinstance(args, dict):
                    raise MalformedToolCallError("arguments are not an object")
            except (json.JSONDecodeError, MalformedToolCallError) as e:
                logger.warning(f"Dropping tool call {tool_call.function.name}: {e}")
                continue
            result.append(ToolCallRequest(name=tool_call.function.name, args=args))
        return result

    async def generate(
        self,
        history: Sequence[ConversationTurn],
        message: str,
        *,
        use_tools: bool = True,
    ) -> ModelReply:
        messages: List[Dict[str, Any]] = [
            {"role": "system", "content": self._system_prompt}
        ]
        messages.extend(
            {"role": _ROLES[turn.role], "content": turn.content}
            for turn in self.prepare_turns(history, message)
        )

        request_kwargs: Dict[str, Any] = {
            "model": self._settings.model,
            "messages": messages,
            "temperature": self._settings.temperature,
            "top_p": self._settings.top_p,
            "max_tokens": self._settings.max_output_tokens,
        }
        if use_tools and len(self._registry):
            request_kwargs["tools"] = self._convert_tools()

        try:
            response = await self._client.chat.completions.create(**request_kwargs)
        except Exception as e:
            logger.error(f"OpenAI API Error: {e}")
            raise self.error(e) from e

        choice = response.choices[0]
        return ModelReply(
            text=choice.message.content or "",
            tool_calls=self._extract_tool_calls(choice.message.tool_calls),
        )

    async def aclose(self) -> None:
        await self._client.close()
