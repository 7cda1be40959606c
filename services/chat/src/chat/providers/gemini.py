"""Gemini provider.

Uses the google-genai SDK with native function declarations.
"""

from typing import Any, Dict, List, Sequence

from google import genai
from google.genai import types
from libs.relay_shared.logging import get_logger

from ..config import LLMSettings
from ..exceptions import ProviderConfigError
from ..models import ConversationTurn, ModelReply, Role, ToolCallRequest
from ..prompting import render_system_prompt
from ..tools import ToolDescriptor, ToolRegistry
from .base import LLMProvider

logger = get_logger(__name__)

_ROLES = {Role.USER: "user", Role.ASSISTANT: "model"}


class GeminiProvider(LLMProvider):
    """Google Gemini provider with native function calling."""

    display_name = "Gemini"

    def __init__(self, settings: LLMSettings, registry: ToolRegistry) -> None:
        """Initialize the Gemini provider.

        Raises:
            ProviderConfigError: If no API key is configured.
        """
        super().__init__(settings, registry)

        if settings.api_key is None or not settings.api_key.get_secret_value():
            raise ProviderConfigError("GOOGLE_API_KEY environment variable is required")

        self._client = genai.Client(api_key=settings.api_key.get_secret_value())
        self._system_instruction = render_system_prompt()

    def _convert_turns(self, turns: Sequence[ConversationTurn]) -> List[types.Content]:
        return [
            types.Content(role=_ROLES[turn.role], parts=[types.Part(text=turn.content)])
            for turn in turns
        ]

    @staticmethod
    def _declaration(tool: ToolDescriptor) -> types.FunctionDeclaration:
        schema = tool.json_schema()
        return types.FunctionDeclaration(
            name=tool.name,
            description=tool.description,
            parameters=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    name: types.Schema(
                        type=types.Type(prop["type"].upper()),
                        description=prop.get("description"),
                        min_length=prop.get("minLength"),
                    )
                    for name, prop in schema["properties"].items()
                },
                required=schema["required"],
            ),
        )

    def _build_config(self, use_tools: bool) -> types.GenerateContentConfig:
        config_kwargs: Dict[str, Any] = {
            "temperature": self._settings.temperature,
            "top_k": self._settings.top_k,
            "top_p": self._settings.top_p,
            "max_output_tokens": self._settings.max_output_tokens,
        }
        if use_tools:
            config_kwargs["system_instruction"] = self._system_instruction
            config_kwargs["tools"] = [
                types.Tool(
                    function_declarations=[
                        self._declaration(tool) for tool in self._registry.descriptors
                    ]
                )
            ]
        return types.GenerateContentConfig(**config_kwargs)

    @staticmethod
    def _extract_text(response: types.GenerateContentResponse) -> str:
        if not response.candidates:
            return ""
        content = response.candidates[0].content
        if content is None or not content.parts:
            return ""
        return "".join(part.text for part in content.parts if part.text)

    @staticmethod
    def _extract_tool_calls(
        response: types.GenerateContentResponse,
    ) -> List[ToolCallRequest]:
        return [
            ToolCallRequest(name=call.name, args=dict(call.args or {}))
            for call in response.function_calls or []
        ]

    async def generate(
        self,
        history: Sequence[ConversationTurn],
        message: str,
        *,
        use_tools: bool = True,
    ) -> ModelReply:
        contents = self._convert_turns(self.prepare_turns(history, message))

        try:
            response = await self._client.aio.models.generate_content(
                model=self._settings.model,
                contents=contents,
                config=self._build_config(use_tools),
            )
        except Exception as e:
            logger.error(f"Gemini API Error: {e}")
            raise self.error(e) from e

        return ModelReply(
            text=self._extract_text(response),
            tool_calls=self._extract_tool_calls(response),
        )
