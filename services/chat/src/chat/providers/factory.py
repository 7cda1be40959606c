"""Provider factory.

Maps the configured provider name to its implementation.
"""

from typing import Dict, List, Type

from ..config import LLMSettings
from ..exceptions import ProviderConfigError, ProviderNotFoundError
from ..tools import ToolRegistry
from .base import LLMProvider
from .gemini import GeminiProvider
from .ollama import OllamaProvider
from .openai_compat import OpenAICompatibleProvider

PROVIDERS: Dict[str, Type[LLMProvider]] = {
    "gemini": GeminiProvider,
    "ollama": OllamaProvider,
    "openai": OpenAICompatibleProvider,
}


def list_providers() -> List[str]:
    return sorted(PROVIDERS)


def create_provider(settings: LLMSettings, registry: ToolRegistry) -> LLMProvider:
    """Create the provider named by `settings.provider`.

    Raises:
        ProviderNotFoundError: If the name is unknown.
        ProviderConfigError: If the provider cannot be instantiated.
    """
    provider_class = PROVIDERS.get(settings.provider.lower())
    if provider_class is None:
        available = ", ".join(list_providers())
        raise ProviderNotFoundError(
            f"Provider '{settings.provider}' not found. Available: {available}"
        )
    try:
        return provider_class(settings, registry)
    except ProviderConfigError:
        raise
    except Exception as e:
        raise ProviderConfigError(
            f"Failed to create provider '{settings.provider}': {e}"
        ) from e
