"""Discoverable tool registry.

Tools are async callables declared with a name, a description and a typed
parameter list. The registry validates incoming parameters against that
declaration and renders the discovery document callers use to introspect
the available tools.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import Request
from pydantic import BaseModel, Field

from src.exceptions import ValidationError
from src.logging_config import get_logger

logger = get_logger(__name__)

ToolHandler = Callable[[dict[str, Any], Request], Awaitable[Any]]


class ParameterType(str, Enum):
    """Parameter types understood by tool callers."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"


class Parameter(BaseModel):
    """A declared tool parameter."""

    name: str = Field(description="Parameter name")
    type: ParameterType = Field(description="Parameter type")
    description: str = Field(description="Human-readable description")
    required: bool = Field(default=False, description="Whether the caller must supply it")

    def coerce(self, value: Any) -> Any:
        """Check a supplied value against the declared type.

        Integral floats are accepted for integer parameters since JSON
        callers do not always distinguish the two.

        Raises:
            ValidationError: If the value has the wrong type.
        """
        if self.type is ParameterType.STRING and isinstance(value, str):
            return value
        if self.type is ParameterType.BOOLEAN and isinstance(value, bool):
            return value
        if not isinstance(value, bool):
            if self.type is ParameterType.INTEGER:
                if isinstance(value, int):
                    return value
                if isinstance(value, float) and value.is_integer():
                    return int(value)
            if self.type is ParameterType.NUMBER and isinstance(value, (int, float)):
                return value

        raise ValidationError(
            f"Parameter '{self.name}' must be of type {self.type.value}",
            details={"parameter": self.name, "received": type(value).__name__},
        )


class ToolDefinition(BaseModel):
    """Discovery entry for one tool."""

    name: str = Field(description="Tool name")
    description: str = Field(description="What the tool does")
    parameters: list[Parameter] = Field(default_factory=list)
    endpoint: str = Field(description="Invocation path")
    http_method: str = Field(default="POST", description="Invocation method")


@dataclass(frozen=True)
class RegisteredTool:
    definition: ToolDefinition
    handler: ToolHandler

    def validate(self, raw: Any) -> dict[str, Any]:
        """Validate raw caller parameters.

        Unknown parameters are dropped and null optional values are
        treated as absent.

        Raises:
            ValidationError: If parameters are missing or mistyped.
        """
        if not isinstance(raw, dict):
            raise ValidationError(
                "Tool parameters must be a JSON object",
                details={"tool": self.definition.name},
            )

        validated: dict[str, Any] = {}
        for param in self.definition.parameters:
            value = raw.get(param.name)
            if value is None:
                if param.required:
                    raise ValidationError(
                        f"Missing required parameter: {param.name}",
                        details={"tool": self.definition.name, "parameter": param.name},
                    )
                continue
            validated[param.name] = param.coerce(value)
        return validated


class ToolRegistry:
    """Collection of registered tools keyed by name."""

    def __init__(self, prefix: str = "/tools") -> None:
        self._prefix = prefix
        self._tools: dict[str, RegisteredTool] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def register(
        self,
        name: str,
        description: str,
        parameters: list[Parameter],
        handler: ToolHandler,
    ) -> RegisteredTool:
        """Register a tool handler.

        Raises:
            ValueError: If a tool with the same name already exists.
        """
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")

        registered = RegisteredTool(
            definition=ToolDefinition(
                name=name,
                description=description,
                parameters=parameters,
                endpoint=f"{self._prefix}/{name}",
            ),
            handler=handler,
        )
        self._tools[name] = registered
        logger.debug(f"Registered tool: {name}")
        return registered

    def tool(
        self,
        name: str,
        description: str,
        parameters: list[Parameter],
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Decorator form of `register`."""

        def decorator(handler: ToolHandler) -> ToolHandler:
            self.register(name, description, parameters, handler)
            return handler

        return decorator

    def get(self, name: str) -> RegisteredTool | None:
        return self._tools.get(name)

    def discovery(self) -> dict[str, Any]:
        """Render the discovery document."""
        return {
            "functions": [
                t.definition.model_dump(mode="json") for t in self._tools.values()
            ]
        }


# Default process-wide registry
registry = ToolRegistry()
tool = registry.tool
