"""Exception hierarchy for the chat relay.

All exceptions inherit from RelayError for easy catching at the top level.
"""


class RelayError(Exception):
    """Base exception for all chat relay errors."""


class ProviderError(RelayError):
    """Model provider errors (transport failures, API errors, timeouts)."""


class ProviderNotFoundError(ProviderError):
    """Requested provider is not known."""


class ProviderConfigError(ProviderError):
    """Provider configuration is invalid."""


class ToolError(RelayError):
    """A requested tool call could not be completed."""


class UnknownToolError(ToolError):
    """The model asked for a tool that is not registered."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")


class InvalidArgumentsError(ToolError):
    """Tool arguments do not match the tool's parameter schema."""


class ToolExecutionError(ToolError):
    """The collaborator behind a tool failed."""


class MalformedToolCallError(RelayError):
    """An emulated tool call's argument fragment could not be decoded."""
