"""
Tool Executor
=============

Runs the tool calls of one assistant message.

Tool Execution:
    1. The model answers with one or more tool calls
    2. All calls start at once and run concurrently
    3. The executor waits until every call has finished
    4. Results come back in the order the calls were requested,
       whatever order they completed in
    5. Each result becomes a `tool` message answering its call id

Calls in the same message are treated as independent of each other.
A failing tool yields an "Error ..." result, never an exception, so one
bad call cannot sink its siblings or the turn.
"""

import asyncio
from dataclasses import dataclass

from aicodegen.agent.messages import ToolCall, ToolMessage
from aicodegen.tools import ToolRegistry, ToolResult, tool_registry
from aicodegen.utils.logger import Logger

logger = Logger("ToolExecutor")


@dataclass
class ToolCallResult:
    """
    Result of executing a tool call.

    Attributes:
        tool_call_id: The original tool call ID
        name: The tool name
        result: The tool result
    """
    tool_call_id: str
    name: str
    result: ToolResult

    def to_message(self) -> ToolMessage:
        return ToolMessage(tool_call_id=self.tool_call_id, content=self.result.to_message())


class ToolExecutor:
    """
    Executes tools called by the model.

    Example:
        executor = ToolExecutor()

        results = await executor.execute_all(reply.tool_calls)
        for result in results:
            conversation.append(result.to_message())
    """

    def __init__(self, registry: ToolRegistry | None = None):
        self.registry = registry if registry is not None else tool_registry

    def declarations(self) -> list[dict]:
        """Tool declarations to send with every model request."""
        return self.registry.get_openai_functions()

    async def execute_one(self, tool_call: ToolCall) -> ToolCallResult:
        """Execute a single tool call; never raises."""
        if tool_call.argument_error:
            logger.warning(f"Bad arguments for {tool_call.name}: {tool_call.argument_error}")
            result = ToolResult.fail(
                f"Invalid arguments for {tool_call.name}: {tool_call.argument_error}"
            )
        else:
            result = await self.registry.execute(tool_call.name, tool_call.arguments)

        if result.success:
            logger.debug(f"Tool {tool_call.name} succeeded")
        else:
            logger.warning(f"Tool {tool_call.name} failed: {result.error}")

        return ToolCallResult(
            tool_call_id=tool_call.id,
            name=tool_call.name,
            result=result
        )

    async def execute_all(self, tool_calls: list[ToolCall]) -> list[ToolCallResult]:
        """
        Execute tool calls concurrently and wait for all of them.

        Args:
            tool_calls: Calls from one assistant message

        Returns:
            One ToolCallResult per call, in input order
        """
        logger.debug(f"Executing {len(tool_calls)} tool call(s)")
        results = await asyncio.gather(*(self.execute_one(tc) for tc in tool_calls))
        return list(results)
