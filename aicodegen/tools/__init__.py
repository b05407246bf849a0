"""
Tools System
============

Tools are the capabilities the model may request: reading, listing,
searching, editing and creating files.

Each tool has:
- a name the model refers to it by
- a description shown to the model
- a JSON Schema for its parameters
- an async executor returning a ToolResult

How Tools Work:
1. Every model request carries the declarations of all registered tools
2. The model answers with zero or more tool calls
3. The registry dispatches each call by name to its executor
4. The result text goes back to the model as a `tool` message

Tools never raise to their caller. Failures become "Error: ..." results so
the model can read the problem and react, and the dialogue continues.

This module provides:
- Tool dataclass for declaring tools
- ToolResult for standardized responses
- ToolRegistry for name -> tool dispatch
- tool_registry, the process-wide registry with the built-in tools
"""

from dataclasses import dataclass
from typing import Any, Callable, Awaitable
import json

from aicodegen.utils.logger import Logger

logger = Logger("Tools")

UNKNOWN_TOOL_MESSAGE = "Unknown tool: {name}"


@dataclass
class ToolResult:
    """
    Standardized result from tool execution.

    Attributes:
        success: Whether the tool executed successfully
        data: The result payload (usually text)
        error: Error message if success is False
    """
    success: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any) -> "ToolResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ToolResult":
        return cls(success=False, error=error)

    def to_message(self) -> str:
        """
        Format as the content of a `tool` message.

        Failures always start with "Error"; messages that already carry
        their own "Error ..." wording are passed through unchanged.
        """
        if self.success:
            if isinstance(self.data, str):
                return self.data
            return json.dumps(self.data, default=str)
        if self.error and self.error.startswith("Error"):
            return self.error
        return f"Error: {self.error}"


@dataclass(frozen=True)
class Tool:
    """
    Declaration of a tool together with its executor.

    Example:
        async def _read_file(params: dict) -> ToolResult:
            return ToolResult.ok(load_text(params["path"]))

        tool = Tool(
            name="read_file",
            description="Read the contents of a file",
            parameters={
                "type": "object",
                "properties": {
                    "path": {"type": "string", "description": "Path to the file"}
                },
                "required": ["path"]
            },
            execute=_read_file
        )
    """
    name: str
    description: str
    parameters: dict
    execute: Callable[[dict], Awaitable[ToolResult]]

    def to_openai_function(self) -> dict:
        """Declaration in OpenAI's function calling format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters
            }
        }

    def missing_arguments(self, params: dict) -> list[str]:
        """Names of required parameters absent from params."""
        required = self.parameters.get("required", [])
        return [name for name in required if params.get(name) is None]


class ToolRegistry:
    """
    Ordered registry mapping tool names to tools.

    Declarations are returned in registration order, so every model
    request lists the tools identically.

    Example:
        registry = ToolRegistry()
        registry.register(read_file_tool)

        declarations = registry.get_openai_functions()
        result = await registry.execute("read_file", {"path": "README.md"})
    """

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with this name already exists
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def get_all(self) -> list[Tool]:
        return list(self._tools.values())

    def get_openai_functions(self) -> list[dict]:
        return [tool.to_openai_function() for tool in self._tools.values()]

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    async def execute(self, name: str, params: dict) -> ToolResult:
        """
        Execute a tool by name.

        Unknown names, missing required arguments and exceptions raised by
        the tool all come back as failed results.

        Args:
            name: The tool name
            params: Parsed arguments from the model

        Returns:
            ToolResult from the tool execution
        """
        tool = self.get(name)
        if not tool:
            logger.warning(f"Model requested unknown tool: {name}")
            return ToolResult.fail(UNKNOWN_TOOL_MESSAGE.format(name=name))

        missing = tool.missing_arguments(params)
        if missing:
            return ToolResult.fail(
                f"Missing required argument(s) for {name}: {', '.join(missing)}"
            )

        try:
            logger.info(f"Executing tool: {name}", params)
            return await tool.execute(params)
        except Exception as e:
            logger.error(f"Tool execution failed: {name}", e)
            return ToolResult.fail(str(e))


# Global tool registry instance
tool_registry = ToolRegistry()


def register_builtin_tools(registry: ToolRegistry | None = None) -> ToolRegistry:
    """
    Register the file-system and documentation tools.

    Safe to call more than once; tools already present are skipped.

    Args:
        registry: Target registry, the global one by default

    Returns:
        The populated registry
    """
    from aicodegen.tools.file_tools import FILE_TOOLS
    from aicodegen.tools.document_tools import DOCUMENT_TOOLS

    registry = registry if registry is not None else tool_registry
    for tool in [*FILE_TOOLS, *DOCUMENT_TOOLS]:
        if registry.get(tool.name) is None:
            registry.register(tool)

    logger.debug(f"Registered {len(registry.list_names())} tools")
    return registry


__all__ = [
    "Tool",
    "ToolResult",
    "ToolRegistry",
    "UNKNOWN_TOOL_MESSAGE",
    "register_builtin_tools",
    "tool_registry",
]
