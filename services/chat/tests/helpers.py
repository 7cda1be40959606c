# services/chat/tests/helpers.py
# Test utilities and helpers

import asyncio
import json
from typing import Any, List, Optional, Sequence, Union

from chat.config import LLMSettings
from chat.models import ConversationTurn, ModelReply, ToolCallRequest
from chat.providers.base import LLMProvider
from chat.tools import ToolRegistry


class FakeProvider(LLMProvider):
    """
    Deterministic provider for tests.

    Scripted replies (or exceptions) are consumed first. After that, calls with
    tools answer with `text` and `tool_calls`, and follow-up calls echo the
    prompt back as "Summary: <prompt>".
    """

    display_name = "Fake"

    def __init__(
        self,
        registry: ToolRegistry,
        replies: Optional[Sequence[Union[ModelReply, Exception]]] = None,
        text: str = "Hello! How can I help you today?",
        tool_calls: Optional[List[ToolCallRequest]] = None,
        delay: float = 0.0,
        history_window: int = 10,
    ):
        super().__init__(
            LLMSettings(
                provider="fake", model="fake-model", history_window=history_window
            ),
            registry,
        )
        self.replies = list(replies or [])
        self.text = text
        self.tool_calls = list(tool_calls or [])
        self.delay = delay
        self.calls: List[dict] = []
        self.closed = False

    async def generate(
        self,
        history: Sequence[ConversationTurn],
        message: str,
        *,
        use_tools: bool = True,
    ) -> ModelReply:
        self.calls.append(
            {
                "turns": self.prepare_turns(history, message),
                "message": message,
                "use_tools": use_tools,
            }
        )
        if self.delay:
            await asyncio.sleep(self.delay)

        if self.replies:
            reply = self.replies.pop(0)
            if isinstance(reply, Exception):
                raise reply
            return reply

        if use_tools:
            return ModelReply(text=self.text, tool_calls=list(self.tool_calls))
        return ModelReply(text=f"Summary: {message}")

    async def aclose(self) -> None:
        self.closed = True


async def collect(events) -> List[Any]:
    """Drain an async iterator of events."""
    return [event async for event in events]


def parse_frames(body: Union[str, bytes]) -> List[dict]:
    """Split an NDJSON body into decoded frames."""
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    return [json.loads(line) for line in body.splitlines() if line.strip()]


def frame_types(frames: List[dict]) -> List[str]:
    return [frame["type"] for frame in frames]


def history(*pairs) -> List[ConversationTurn]:
    """Build turns from (role, content) pairs."""
    return [ConversationTurn(role=role, content=content) for role, content in pairs]
