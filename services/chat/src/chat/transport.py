# services/chat/src/chat/transport.py
"""Newline-delimited JSON encoding of stream events."""

from typing import AsyncIterable, AsyncIterator

from .models import StreamEvent

NDJSON_MEDIA_TYPE = "text/plain; charset=utf-8"

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable Nginx buffering
}


def encode_frame(event: StreamEvent) -> str:
    """One compact JSON object followed by a newline; unset fields are left out."""
    return event.model_dump_json(exclude_none=True) + "\n"


async def ndjson_stream(events: AsyncIterable[StreamEvent]) -> AsyncIterator[bytes]:
    """Encode events as they are produced."""
    async for event in events:
        yield encode_frame(event).encode("utf-8")
