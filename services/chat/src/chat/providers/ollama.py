"""Ollama provider.

Uses the ollama Python SDK for local model inference. Tool calling is
emulated: the model is taught a TOOL_CALL text format through the system
prompt and its answer is scanned for those markers.
"""

from typing import Any, Dict, List, Sequence

import ollama
from libs.relay_shared.logging import get_logger

from ..config import LLMSettings
from ..exceptions import ProviderError
from ..models import ConversationTurn, ModelReply, Role
from ..prompting import render_tool_calling_prompt
from ..tools import ToolRegistry
from .base import LLMProvider
from .parsing import parse_tool_calls

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"

_ROLES = {Role.USER: "user", Role.ASSISTANT: "assistant"}


class OllamaProvider(LLMProvider):
    """Ollama provider for local LLM inference."""

    display_name = "Ollama"

    def __init__(self, settings: LLMSettings, registry: ToolRegistry) -> None:
        super().__init__(settings, registry)
        self.base_url = settings.base_url or DEFAULT_BASE_URL
        self._client = ollama.AsyncClient(host=self.base_url)
        self._tool_prompt = render_tool_calling_prompt(registry.descriptors)

    def _convert_messages(
        self, turns: Sequence[ConversationTurn], use_tools: bool
    ) -> List[Dict[str, Any]]:
        """Convert turns to Ollama chat messages, preceded by the tool preamble."""
        messages: List[Dict[str, Any]] = []
        if use_tools:
            messages.append({"role": "system", "content": self._tool_prompt})
        messages.extend(
            {"role": _ROLES[turn.role], "content": turn.content} for turn in turns
        )
        return messages

    def _options(self) -> Dict[str, Any]:
        return {
            "temperature": self._settings.temperature,
            "top_k": self._settings.top_k,
            "top_p": self._settings.top_p,
            "num_predict": self._settings.max_output_tokens,
        }

    async def generate(
        self,
        history: Sequence[ConversationTurn],
        message: str,
        *,
        use_tools: bool = True,
    ) -> ModelReply:
        messages = self._convert_messages(self.prepare_turns(history, message), use_tools)

        try:
            response = await self._client.chat(
                model=self._settings.model,
                messages=messages,
                stream=False,
                options=self._options(),
            )
        except ollama.ResponseError as e:
            # Parse common Ollama errors for better user feedback
            if "not found" in str(e).lower():
                msg = (
                    f"Ollama API error: model '{self._settings.model}' not found. "
                    f"Check that the model exists on the server "
                    f"(run 'ollama list' or check /api/tags endpoint). "
                    f"Original error: {e}"
                )
                logger.error(msg)
                raise ProviderError(msg) from e
            logger.error(f"Ollama API Error: {e}")
            raise self.error(e) from e
        except Exception as e:
            logger.error(f"Ollama API Error: {e}")
            raise self.error(e) from e

        text = response.message.content or ""
        return ModelReply(
            text=text,
            tool_calls=parse_tool_calls(text) if use_tools else [],
        )

    async def health(self) -> Dict[str, Any]:
        """List the models the Ollama server has pulled."""
        try:
            listing = await self._client.list()
        except Exception as e:
            raise ProviderError(f"Ollama not responding: {e}") from e

        return {
            "ollama_url": self.base_url,
            "ollama_model": self._settings.model,
            "available_models": [model.model for model in listing.models],
        }

    def endpoint_info(self) -> Dict[str, Any]:
        return {"ollama_url": self.base_url}
