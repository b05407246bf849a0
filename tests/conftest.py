"""Shared test fixtures for aicodegen.

Provides a scripted model backend, a tool registry with the built-in
tools, and isolation from the user's environment and credential file.
"""

from types import SimpleNamespace

import pytest

from aicodegen.agent.errors import BackendError
from aicodegen.agent.messages import AssistantMessage, ToolCall
from aicodegen.agent.tools_executor import ToolExecutor
from aicodegen.tools import ToolRegistry, register_builtin_tools
from aicodegen.tools.document_tools import set_summary_backend
from aicodegen.utils.config import reset_config


class ScriptedBackend:
    """Replays canned replies and records every request it receives.

    Each scripted item is either an AssistantMessage to return or an
    exception instance to raise.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.requests: list[dict] = []

    async def complete(self, messages, tools=None):
        self.requests.append({
            "messages": [message.to_openai() for message in messages],
            "tools": tools,
        })
        if not self.replies:
            raise BackendError("No scripted reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def tool_call(call_id: str, name: str, **arguments) -> ToolCall:
    return ToolCall(id=call_id, name=name, arguments=arguments)


def calls(*tool_calls: ToolCall) -> AssistantMessage:
    return AssistantMessage(content=None, tool_calls=tool_calls)


def final(text: str) -> AssistantMessage:
    return AssistantMessage(content=text)


def openai_tool_call(call_id: str, name: str, arguments: str):
    """Object shaped like an OpenAI ChatCompletionMessageToolCall."""
    return SimpleNamespace(
        id=call_id,
        type="function",
        function=SimpleNamespace(name=name, arguments=arguments),
    )


def openai_response(content=None, tool_calls=None):
    """Object shaped like an OpenAI ChatCompletion."""
    message = SimpleNamespace(role="assistant", content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep tests away from the real credential file and API key."""
    monkeypatch.setenv("AICODEGEN_HOME", str(tmp_path / "aicodegen-home"))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("AICODEGEN_MODEL", raising=False)
    monkeypatch.delenv("AICODEGEN_TEMPERATURE", raising=False)
    monkeypatch.delenv("AICODEGEN_SUMMARIZE_THRESHOLD", raising=False)
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    reset_config()
    yield
    reset_config()
    set_summary_backend(None)


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """An empty working directory the tools operate in."""
    root = (tmp_path / "workspace").resolve()
    root.mkdir()
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def registry() -> ToolRegistry:
    """A fresh registry holding the built-in tools."""
    return register_builtin_tools(ToolRegistry())


@pytest.fixture
def executor(registry) -> ToolExecutor:
    return ToolExecutor(registry)
