"""Chat service configuration."""

from typing import List, Literal, Optional

from libs.relay_shared.config import BaseServiceConfig
from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator


class LLMSettings(BaseModel):
    """Settings handed to a model provider."""

    provider: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    api_key: Optional[SecretStr] = None
    base_url: Optional[str] = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    top_k: int = Field(default=40, ge=1)
    top_p: float = Field(default=0.95, gt=0.0, le=1.0)
    max_output_tokens: int = Field(default=1024, ge=1)
    # Number of most recent turns forwarded to the model
    history_window: int = Field(default=10, ge=0)


class ChatConfig(BaseServiceConfig):
    """Chat service specific configuration."""

    # Service settings
    port: int = Field(
        4000,
        validation_alias=AliasChoices("http_port", "port"),
        description="Port the chat API listens on",
    )

    # Model selection
    llm_provider: Literal["gemini", "ollama", "openai"] = Field("gemini")

    # Gemini
    google_api_key: Optional[SecretStr] = Field(None)
    gemini_model: str = Field("gemini-2.0-flash-exp")

    # Ollama
    ollama_base_url: str = Field("http://localhost:11434")
    ollama_model: str = Field("qwen3:4b")

    # OpenAI-compatible endpoints
    openai_api_key: Optional[SecretStr] = Field(None)
    openai_model: str = Field("gpt-4o-mini")
    openai_base_url: Optional[str] = Field(None)

    # Generation settings
    temperature: float = Field(0.7)
    top_k: int = Field(40)
    top_p: float = Field(0.95)
    max_output_tokens: int = Field(1024)
    history_window: int = Field(10)

    # Tool collaborators
    users_api_url: str = Field(
        "http://localhost:3000",
        description="Base URL of the users service the tools call",
    )

    # Runtime limits (seconds)
    provider_timeout: float = Field(60.0, gt=0)
    tool_timeout: float = Field(30.0, gt=0)

    # Guardrails
    max_message_length: int = Field(10000, ge=1)

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

    def llm_settings(self) -> LLMSettings:
        """Collect the settings of the selected provider."""
        per_provider = {
            "gemini": (self.gemini_model, self.google_api_key, None),
            "ollama": (self.ollama_model, None, self.ollama_base_url),
            "openai": (self.openai_model, self.openai_api_key, self.openai_base_url),
        }
        model, api_key, base_url = per_provider[self.llm_provider]
        return LLMSettings(
            provider=self.llm_provider,
            model=model,
            api_key=api_key,
            base_url=base_url,
            temperature=self.temperature,
            top_k=self.top_k,
            top_p=self.top_p,
            max_output_tokens=self.max_output_tokens,
            history_window=self.history_window,
        )
