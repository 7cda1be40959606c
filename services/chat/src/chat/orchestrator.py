# services/chat/src/chat/orchestrator.py
"""
Conversation orchestrator.

Runs one chat request: ask the model, execute the tool calls it requests one
after another, summarize each result, and report every step as a stream event.
"""

import asyncio
import json
from typing import AsyncIterator, Sequence

from libs.relay_shared.logging import get_logger

from .exceptions import ProviderError, ToolError
from .models import (
    CompleteEvent,
    ContentEvent,
    ConversationTurn,
    ErrorEvent,
    FunctionCallEvent,
    ModelReply,
    StreamEvent,
    ThinkingEvent,
    ToolCallRequest,
    ToolCallStatus,
)
from .providers.base import LLMProvider
from .tools import ToolRegistry

logger = get_logger(__name__)

THINKING_MESSAGE = "Processing..."


class ChatOrchestrator:
    """
    Drives the tool-calling loop for a single request.

    Holds no per-request state; one instance serves every request.
    """

    def __init__(
        self,
        provider: LLMProvider,
        registry: ToolRegistry,
        provider_timeout: float = 60.0,
    ):
        self.provider = provider
        self.registry = registry
        self.provider_timeout = provider_timeout

    async def _ask(
        self,
        history: Sequence[ConversationTurn],
        message: str,
        use_tools: bool = True,
    ) -> ModelReply:
        """Call the provider, cancelling it after provider_timeout seconds."""
        try:
            return await asyncio.wait_for(
                self.provider.generate(history, message, use_tools=use_tools),
                timeout=self.provider_timeout,
            )
        except asyncio.TimeoutError:
            raise ProviderError(
                f"{self.provider.display_name} API error: no response within "
                f"{self.provider_timeout:g}s"
            ) from None

    @staticmethod
    def follow_up_prompt(tool_name: str, result) -> str:
        return (
            f"Based on the {tool_name} result: {json.dumps(result)}, "
            f"provide a helpful response to the user."
        )

    async def _dispatch(
        self, call: ToolCallRequest, history: Sequence[ConversationTurn]
    ) -> AsyncIterator[StreamEvent]:
        yield FunctionCallEvent(
            function=call.name, args=call.args, status=ToolCallStatus.EXECUTING
        )

        try:
            result = await self.registry.execute(call.name, call.args)
        except ToolError as e:
            logger.warning(f"Tool {call.name} failed: {e}")
            yield FunctionCallEvent(
                function=call.name, status=ToolCallStatus.ERROR, error=str(e)
            )
            yield ContentEvent(content=f"Error during {call.name}: {e}")
            return

        yield FunctionCallEvent(
            function=call.name,
            args=call.args,
            status=ToolCallStatus.COMPLETED,
            result=result,
        )

        follow_up = await self._ask(
            history, self.follow_up_prompt(call.name, result), use_tools=False
        )
        yield ContentEvent(content=follow_up.text)

    async def run(
        self, message: str, history: Sequence[ConversationTurn] = ()
    ) -> AsyncIterator[StreamEvent]:
        """
        Produce the events for one chat request.

        The sequence always starts with a thinking event and ends with either
        a complete event or an error event.
        """
        yield ThinkingEvent(content=THINKING_MESSAGE)

        try:
            reply = await self._ask(history, message)

            if reply.tool_calls:
                for call in reply.tool_calls:
                    async for event in self._dispatch(call, history):
                        yield event
            else:
                yield ContentEvent(content=reply.text)

        except ProviderError as e:
            logger.error(f"Chat Error: {e}")
            yield ErrorEvent(message=str(e))
            return
        except Exception as e:
            logger.error(f"Chat Error: {e}", exc_info=True)
            yield ErrorEvent(message=str(e))
            return

        yield CompleteEvent()
