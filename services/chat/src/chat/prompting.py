# services/chat/src/chat/prompting.py
"""System prompt rendering from the Jinja2 templates in prompts/."""

import os
from typing import Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .providers.parsing import TOOL_CALL_MARKER
from .tools import ToolDescriptor

prompts_dir = os.path.join(os.path.dirname(__file__), "prompts")
env = Environment(
    loader=FileSystemLoader(prompts_dir),
    autoescape=select_autoescape(),
    trim_blocks=True,
    lstrip_blocks=True,
)


def _example_call(tool: ToolDescriptor) -> str:
    args = ", ".join(f'"{name}": "<{name}>"' for name in tool.parameters)
    return f"{tool.name}({args})"


def render_system_prompt() -> str:
    """Instruction for providers with native function calling."""
    return env.get_template("system.j2").render().strip()


def render_tool_calling_prompt(tools: Sequence[ToolDescriptor]) -> str:
    """Instruction teaching a plain-text model the TOOL_CALL format."""
    return (
        env.get_template("tool_calling.j2")
        .render(
            tools=tools,
            marker=TOOL_CALL_MARKER,
            example=_example_call(tools[0]) if tools else None,
        )
        .strip()
    )
