"""Abstract base class for LLM providers.

Defines the interface that every model backend implements: send the
conversation, receive text plus requested tool calls.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Sequence

from ..config import LLMSettings
from ..exceptions import ProviderError
from ..models import ConversationTurn, ModelReply
from ..tools import ToolRegistry
from .history import normalize_history


class LLMProvider(ABC):
    """Abstract base class for all LLM providers."""

    #: Label used to tag error messages, e.g. "Gemini API error: ..."
    display_name: ClassVar[str] = "LLM"

    def __init__(self, settings: LLMSettings, registry: ToolRegistry) -> None:
        """Initialize the provider.

        Args:
            settings: Model, credentials and generation options.
            registry: Tools the model may request.
        """
        self._settings = settings
        self._registry = registry

    @property
    def settings(self) -> LLMSettings:
        return self._settings

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def prepare_turns(
        self, history: Sequence[ConversationTurn], message: str
    ) -> List[ConversationTurn]:
        """Window, validate and de-duplicate the history, then add the message."""
        return normalize_history(history, message, self._settings.history_window)

    def error(self, exc: Exception) -> ProviderError:
        """Wrap any failure into a provider-tagged ProviderError."""
        return ProviderError(f"{self.display_name} API error: {exc}")

    @abstractmethod
    async def generate(
        self,
        history: Sequence[ConversationTurn],
        message: str,
        *,
        use_tools: bool = True,
    ) -> ModelReply:
        """Send the conversation and the current message to the model.

        Args:
            history: Prior turns, oldest first, as submitted by the client.
            message: The current user message.
            use_tools: Advertise the registered tools. Disabled for
                follow-up calls that only summarize a tool result.

        Returns:
            ModelReply with the text and any requested tool calls.

        Raises:
            ProviderError: If the API call fails.
        """
        ...

    async def health(self) -> Dict[str, Any]:
        """Describe the backend; raise ProviderError when it is unusable."""
        return {"provider": self._settings.provider, "model": self._settings.model}

    def endpoint_info(self) -> Dict[str, Any]:
        """Details that are reported even when the backend is unhealthy."""
        return {"provider": self._settings.provider}

    async def aclose(self) -> None:
        """Release client resources."""
