"""Extraction of emulated tool calls from free model text.

Models without native function calling are told to answer with lines like::

    TOOL_CALL: getWeatherData("city": "Paris")
"""

import json
import re
from typing import List

from libs.relay_shared.logging import get_logger

from ..exceptions import MalformedToolCallError
from ..models import ToolCallRequest

logger = get_logger(__name__)

TOOL_CALL_MARKER = "TOOL_CALL:"
TOOL_CALL_PATTERN = re.compile(r"TOOL_CALL:\s*(\w+)\s*\((.*?)\)")


def parse_arguments(fragment: str) -> dict:
    """Decode a `"key": value, ...` fragment as a JSON object.

    Raises:
        MalformedToolCallError: If the fragment is not a JSON object body.
    """
    try:
        args = json.loads("{" + fragment + "}")
    except json.JSONDecodeError as e:
        raise MalformedToolCallError(f"Invalid tool call arguments: {fragment!r}") from e
    if not isinstance(args, dict):
        raise MalformedToolCallError(f"Tool call arguments are not an object: {fragment!r}")
    return args


def parse_tool_calls(text: str) -> List[ToolCallRequest]:
    """Return every well-formed tool call in `text`, in order of appearance.

    Occurrences whose arguments cannot be decoded are logged and skipped.
    """
    calls: List[ToolCallRequest] = []
    for match in TOOL_CALL_PATTERN.finditer(text or ""):
        name, fragment = match.group(1), match.group(2)
        try:
            args = parse_arguments(fragment)
        except MalformedToolCallError as e:
            logger.warning(f"Dropping tool call {name}: {e}")
            continue
        calls.append(ToolCallRequest(name=name, args=args))
    return calls
