"""
Conversation Messages
=====================

The four kinds of message that make up a dialogue with the model:

    SystemMessage      instructions (system prompt, compaction marker)
    UserMessage        what the user typed
    AssistantMessage   model output: text, tool calls, or both
    ToolMessage        the result of one tool call, tied to it by id

Each class only carries the fields its role allows and checks them on
construction, so a malformed message (a tool result without a call id, a
user message without text) cannot be built.

Messages are immutable. to_openai() gives the Chat Completions wire form.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class ToolCall:
    """
    A tool invocation requested by the model.

    Attributes:
        id: Call ID, unique within one assistant message
        name: Requested tool name (may not exist in the registry)
        arguments: Decoded arguments
        raw_arguments: The JSON text exactly as the model produced it
        argument_error: Why raw_arguments could not be decoded, if it couldn't
    """
    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    raw_arguments: str | None = None
    argument_error: str | None = None

    def __post_init__(self):
        # Every call must be answerable by a ToolMessage
        if not isinstance(self.id, str) or not self.id:
            raise ValueError(f"tool call requires a non-empty id, got {self.id!r}")
        if not isinstance(self.name, str):
            raise ValueError(f"tool call name must be a string, got {type(self.name).__name__}")

    @classmethod
    def from_openai(cls, tool_call: Any) -> "ToolCall":
        """
        Build from an OpenAI tool call object.

        Undecodable arguments do not raise: they are recorded in
        argument_error and reported back to the model when executed.
        """
        raw = tool_call.function.arguments or "{}"
        try:
            arguments = json.loads(raw)
        except json.JSONDecodeError as e:
            return cls(tool_call.id, tool_call.function.name, {}, raw, f"invalid JSON: {e}")

        if not isinstance(arguments, dict):
            return cls(
                tool_call.id, tool_call.function.name, {}, raw,
                "arguments must be a JSON object"
            )
        return cls(tool_call.id, tool_call.function.name, arguments, raw)

    def to_openai(self) -> dict:
        arguments = self.raw_arguments
        if arguments is None:
            arguments = json.dumps(self.arguments)
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": arguments}
        }

    def describe(self) -> str:
        """Short human-readable form, e.g. read_file({"path": "a.py"})"""
        arguments = self.raw_arguments if self.raw_arguments is not None else json.dumps(self.arguments)
        return f"{self.name}({arguments})"


def _require_text(value: Any, role: Role) -> None:
    if not isinstance(value, str):
        raise ValueError(f"{role.value} message content must be a string, got {type(value).__name__}")


@dataclass(frozen=True)
class SystemMessage:
    content: str
    role = Role.SYSTEM

    def __post_init__(self):
        _require_text(self.content, self.role)

    def to_openai(self) -> dict:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class UserMessage:
    content: str
    role = Role.USER

    def __post_init__(self):
        _require_text(self.content, self.role)

    def to_openai(self) -> dict:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class AssistantMessage:
    """
    Model output.

    A message with tool_calls asks for tools to run; one without is the
    final answer of a turn. content may be None only when tool calls are
    present, or when the model returned nothing at all (see is_empty).
    """
    content: str | None = None
    tool_calls: tuple[ToolCall, ...] = ()
    role = Role.ASSISTANT

    def __post_init__(self):
        if self.content is not None:
            _require_text(self.content, self.role)
        # Accept lists from callers but store an immutable tuple
        object.__setattr__(self, "tool_calls", tuple(self.tool_calls))
        ids = [call.id for call in self.tool_calls]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate tool call ids in assistant message: {ids}")

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)

    @property
    def is_empty(self) -> bool:
        """True for a response carrying neither text nor tool calls."""
        return not self.content and not self.tool_calls

    @classmethod
    def from_openai(cls, message: Any) -> "AssistantMessage":
        """Build from the `message` of an OpenAI chat completion choice."""
        tool_calls = [ToolCall.from_openai(tc) for tc in (message.tool_calls or [])]
        return cls(content=message.content, tool_calls=tuple(tool_calls))

    def to_openai(self) -> dict:
        result: dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.tool_calls:
            result["tool_calls"] = [call.to_openai() for call in self.tool_calls]
        elif self.content is None:
            result["content"] = ""
        return result


@dataclass(frozen=True)
class ToolMessage:
    tool_call_id: str
    content: str
    role = Role.TOOL

    def __post_init__(self):
        if not self.tool_call_id:
            raise ValueError("tool message requires a tool_call_id")
        _require_text(self.content, self.role)

    def to_openai(self) -> dict:
        return {
            "role": self.role.value,
            "tool_call_id": self.tool_call_id,
            "content": self.content
        }


Message = Union[SystemMessage, UserMessage, AssistantMessage, ToolMessage]
