"""
Conversation Store
==================

The ordered log of messages exchanged with the model during one session.

Design Notes:
- Append-only; insertion order is dialogue order
- A tool message must answer a call issued by an earlier assistant
  message, and each call is answered at most once
- estimated_size() is the trigger for summarization: the length of every
  message's compact JSON wire form, recomputed on each call
- Compaction never edits a conversation in place. Conversation.compacted()
  builds a new two-message conversation which the agent swaps in.

One conversation belongs to one session and is only touched by that
session's turn, so there is no locking.
"""

import json
from typing import Iterable, Iterator

from aicodegen.agent.messages import (
    AssistantMessage,
    Message,
    SystemMessage,
    ToolMessage,
)

COMPACTED_MARKER = "This is a summarized version of the previous conversation to reduce size."


def message_size(message: Message) -> int:
    """Characters in the compact JSON serialization of a message."""
    return len(json.dumps(message.to_openai(), separators=(",", ":"), ensure_ascii=False))


class Conversation:
    """
    Append-only message log.

    Example:
        conversation = Conversation([SystemMessage("You are a coding assistant")])
        conversation.append(UserMessage("list files in ./src"))

        conversation.estimated_size()       # serialized size in characters
        conversation.to_openai_messages()   # payload for the model
    """

    def __init__(self, messages: Iterable[Message] = ()):
        self._messages: list[Message] = []
        self._pending_calls: set[str] = set()
        for message in messages:
            self.append(message)

    @classmethod
    def compacted(cls, summary: str) -> "Conversation":
        """A fresh conversation holding only the compaction marker and a summary."""
        return cls([SystemMessage(COMPACTED_MARKER), AssistantMessage(content=summary)])

    def append(self, message: Message) -> None:
        """
        Append a message.

        Raises:
            ValueError: If a tool message answers an unknown or already
                answered tool call
        """
        if isinstance(message, ToolMessage):
            if message.tool_call_id not in self._pending_calls:
                raise ValueError(
                    f"Tool message for unknown or already answered call: {message.tool_call_id}"
                )
            self._pending_calls.discard(message.tool_call_id)
        elif isinstance(message, AssistantMessage):
            self._pending_calls.update(call.id for call in message.tool_calls)

        self._messages.append(message)

    def extend(self, messages: Iterable[Message]) -> None:
        for message in messages:
            self.append(message)

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def pending_tool_calls(self) -> frozenset[str]:
        """Ids of tool calls that have no result yet."""
        return frozenset(self._pending_calls)

    def estimated_size(self) -> int:
        return sum(message_size(message) for message in self._messages)

    def to_openai_messages(self) -> list[dict]:
        return [message.to_openai() for message in self._messages]

    def transcript(self) -> str:
        """
        Plain-text rendering used as input for summarization.

        One "role: content" line per message; tool requests are spelled
        out so the summary can mention what was looked at or changed.
        """
        lines = []
        for message in self._messages:
            content = message.content or ""
            if isinstance(message, AssistantMessage) and message.tool_calls:
                calls = ", ".join(call.describe() for call in message.tool_calls)
                content = f"{content}\n[requested tools: {calls}]".strip()
            lines.append(f"{message.role.value}: {content}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]
