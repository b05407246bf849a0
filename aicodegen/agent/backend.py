"""
Model Backend
=============

Thin wrapper around the OpenAI Chat Completions API.

The backend sends the conversation (and, for agent turns, the tool
declarations with tool_choice="auto") and returns the reply as an
AssistantMessage. Anything that prevents a usable reply, whether a
network failure, an API status error or a payload without choices,
is raised as BackendError.

There is no retry or timeout logic here; the client library's own
timeout behaviour applies.
"""

from typing import Any, Sequence

import openai
from openai import AsyncOpenAI

from aicodegen.agent.errors import BackendError
from aicodegen.agent.messages import AssistantMessage, Message
from aicodegen.utils.config import Config, get_config
from aicodegen.utils.logger import Logger

logger = Logger("Backend")


class ModelBackend:
    """
    Sends conversations to the model.

    Example:
        backend = ModelBackend.from_config()
        reply = await backend.complete(conversation.messages, tools=declarations)

        if reply.has_tool_calls:
            ...
    """

    def __init__(self, client: Any, model: str, temperature: float):
        """
        Args:
            client: An AsyncOpenAI-compatible client
            model: Model name for chat completions
            temperature: Sampling temperature
        """
        self.client = client
        self.model = model
        self.temperature = temperature

    @classmethod
    def from_config(cls, config: Config | None = None) -> "ModelBackend":
        config = config or get_config()
        client = AsyncOpenAI(api_key=config.openai.api_key, base_url=config.openai.base_url)
        logger.info(f"Backend initialized with model: {config.openai.model}")
        return cls(client, config.openai.model, config.openai.temperature)

    async def complete(
        self,
        messages: Sequence[Message],
        tools: list[dict] | None = None
    ) -> AssistantMessage:
        """
        Request the next assistant message.

        Args:
            messages: The conversation so far
            tools: Tool declarations; when given the model may call them

        Returns:
            The assistant message (final text and/or tool calls)

        Raises:
            BackendError: On transport, API or payload errors
        """
        request: dict[str, Any] = {
            "model": self.model,
            "messages": [message.to_openai() for message in messages],
            "temperature": self.temperature,
        }
        if tools:
            request["tools"] = tools
            request["tool_choice"] = "auto"

        logger.debug(f"Requesting completion ({len(messages)} messages)")

        try:
            response = await self.client.chat.completions.create(**request)
        except openai.OpenAIError as e:
            raise BackendError(f"Model request failed: {e}") from e

        choices = getattr(response, "choices", None)
        if not choices:
            raise BackendError("Malformed response from model: no choices")

        try:
            return AssistantMessage.from_openai(choices[0].message)
        except (AttributeError, TypeError, ValueError) as e:
            raise BackendError(f"Malformed response from model: {e}") from e
