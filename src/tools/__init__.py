"""Tool registration and discovery."""

from src.tools.registry import (
    Parameter,
    ParameterType,
    RegisteredTool,
    ToolDefinition,
    ToolRegistry,
    registry,
    tool,
)

__all__ = [
    "Parameter",
    "ParameterType",
    "RegisteredTool",
    "ToolDefinition",
    "ToolRegistry",
    "registry",
    "tool",
]
