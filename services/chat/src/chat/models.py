# services/chat/src/chat/models.py

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

## CONVERSATION MODELS ##


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ConversationTurn(BaseModel):
    """
    One message of the conversation, owned and resubmitted by the client.

    The browser widget labels turns with `type`; `role` is accepted as well.
    """

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., validation_alias=AliasChoices("role", "type"))
    content: str = ""
    timestamp: Optional[datetime] = None


## TOOL CALL MODELS ##


class ToolCallRequest(BaseModel):
    """A tool invocation requested by the model."""

    name: str
    args: Dict[str, Any] = Field(default_factory=dict)


class ModelReply(BaseModel):
    """Normalized answer of any model provider."""

    text: str = ""
    tool_calls: List[ToolCallRequest] = Field(default_factory=list)


class ToolCallStatus(str, Enum):
    EXECUTING = "executing"
    COMPLETED = "completed"
    ERROR = "error"


## STREAM EVENTS ##


class ThinkingEvent(BaseModel):
    type: Literal["thinking"] = "thinking"
    content: str


class FunctionCallEvent(BaseModel):
    type: Literal["function_call"] = "function_call"
    function: str
    args: Optional[Dict[str, Any]] = None
    status: ToolCallStatus
    result: Optional[Any] = None
    error: Optional[str] = None


class ContentEvent(BaseModel):
    type: Literal["content"] = "content"
    content: str


class CompleteEvent(BaseModel):
    type: Literal["complete"] = "complete"


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str


StreamEvent = Union[
    ThinkingEvent, FunctionCallEvent, ContentEvent, CompleteEvent, ErrorEvent
]


## CHAT MODELS ##


class ChatRequest(BaseModel):
    """
    Request model for the chat endpoint.

    Contains the new message and the recent conversation the client holds.
    """

    message: str
    conversation_history: List[ConversationTurn] = Field(default_factory=list)
