# services/chat/src/chat/tools.py
"""
Tool registry and executor.

Every tool pairs a static descriptor (name, description, parameter schema)
with an async executor that performs exactly one call to a collaborator.
"""

from dataclasses import dataclass, field
from functools import cached_property
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    List,
    Literal,
    Mapping,
    Optional,
    Tuple,
    Type,
)

from libs.relay_shared.logging import get_logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from .collaborators import UsersApiClient
from .exceptions import InvalidArgumentsError, UnknownToolError

logger = get_logger(__name__)

# Wire names; the model and MCP clients address tools by these exact strings.
WEATHER_TOOL = "getWeatherData"
USERS_BY_CITY_TOOL = "getLoctionWiseUserData"
DELETE_USER_TOOL = "deleteUserlData"

_ANNOTATIONS = {"string": str, "integer": int, "number": float, "boolean": bool}

# Schema keys pydantic adds that the model-facing declarations do not carry
_UNADVERTISED_KEYS = ("title", "default")

ToolExecutor = Callable[[Dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class ToolParameter:
    type: Literal["string", "integer", "number", "boolean"]
    description: str
    required: bool = True

    def field_definition(self) -> Tuple[Any, Any]:
        """(annotation, FieldInfo) pair for create_model."""
        annotation = _ANNOTATIONS[self.type]
        if not self.required:
            return Optional[annotation], Field(None, description=self.description)
        if annotation is str:
            return str, Field(..., min_length=1, description=self.description)
        return annotation, Field(..., description=self.description)


@dataclass(frozen=True)
class ToolDescriptor:
    """Static description of a tool, as advertised to the model."""

    name: str
    description: str
    parameters: Mapping[str, ToolParameter] = field(default_factory=dict)

    @cached_property
    def params_model(self) -> Type[BaseModel]:
        """Pydantic model the tool's arguments are validated against."""
        fields = {
            name: param.field_definition() for name, param in self.parameters.items()
        }
        return create_model(
            f"{self.name}Params",
            __config__=ConfigDict(strict=True, extra="ignore"),
            **fields,
        )

    @property
    def required(self) -> List[str]:
        return [name for name, param in self.parameters.items() if param.required]

    def json_schema(self) -> Dict[str, Any]:
        """Parameters as a JSON Schema object, rendered from the params model."""
        schema = self.params_model.model_json_schema()
        properties = {}
        for name, prop in schema.get("properties", {}).items():
            prop = {k: v for k, v in prop.items() if k not in _UNADVERTISED_KEYS}
            # Optional parameters render as anyOf [<type>, null]
            if "anyOf" in prop:
                prop["type"] = next(
                    option["type"]
                    for option in prop.pop("anyOf")
                    if option.get("type") != "null"
                )
            properties[name] = prop
        return {
            "type": "object",
            "properties": properties,
            "required": schema.get("required", []),
        }

    def signature(self) -> str:
        return f"{self.name}({', '.join(self.parameters)})"

    def validate(self, args: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Check arguments against the params model.

        Returns:
            The validated arguments, without unset optional ones

        Raises:
            InvalidArgumentsError: If a required argument is missing or empty,
                or an argument has the wrong type
        """
        try:
            params = self.params_model.model_validate(dict(args))
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise InvalidArgumentsError(
                f"Invalid arguments for {self.name}: {problems}"
            ) from e
        return params.model_dump(exclude_none=True)


@dataclass(frozen=True)
class Tool:
    descriptor: ToolDescriptor
    executor: ToolExecutor

    @property
    def name(self) -> str:
        return self.descriptor.name


class ToolRegistry:
    """Fixed mapping from tool name to descriptor and executor."""

    def __init__(self, tools: Iterable[Tool]):
        self._tools: Dict[str, Tool] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            if not callable(tool.executor):
                raise ValueError(f"Tool {tool.name} has no executor")
            self._tools[tool.name] = tool

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def descriptors(self) -> List[ToolDescriptor]:
        return [tool.descriptor for tool in self._tools.values()]

    def get(self, name: str) -> Tool:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    async def execute(self, name: str, args: Mapping[str, Any]) -> Any:
        """
        Validate the arguments and run the tool.

        Raises:
            UnknownToolError: If the tool is not registered
            InvalidArgumentsError: If the arguments do not match the schema
            ToolExecutionError: If the collaborator call fails
        """
        tool = self.get(name)
        validated = tool.descriptor.validate(args)
        logger.info(f"Executing tool {name}")
        return await tool.executor(validated)


def build_registry(users: UsersApiClient) -> ToolRegistry:
    """Register the weather and user-management tools backed by the users service."""

    async def get_weather(args: Dict[str, Any]) -> Any:
        return await users.get_weather(args["city"])

    async def get_users_by_city(args: Dict[str, Any]) -> Any:
        return await users.get_users_by_city(args["city"])

    async def delete_user(args: Dict[str, Any]) -> Any:
        return await users.delete_user(args["email"], args["token"])

    city = ToolParameter("string", "City name")
    return ToolRegistry(
        [
            Tool(
                ToolDescriptor(
                    WEATHER_TOOL,
                    "Get weather information for a specific city",
                    {"city": city},
                ),
                get_weather,
            ),
            Tool(
                ToolDescriptor(
                    USERS_BY_CITY_TOOL,
                    "Get user data for a specific city",
                    {"city": city},
                ),
                get_users_by_city,
            ),
            Tool(
                ToolDescriptor(
                    DELETE_USER_TOOL,
                    "Delete user by email and token",
                    {
                        "email": ToolParameter("string", "User email"),
                        "token": ToolParameter("string", "Auth token"),
                    },
                ),
                delete_user,
            ),
        ]
    )
