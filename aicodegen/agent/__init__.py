"""
Agent System
============

The agent turns a user's message into a final answer, calling file-system
tools along the way when the model asks for them.

This module provides:
- Agent: the orchestration loop for one session
- Conversation: the session's message log
- Summarizer: compaction of oversized conversations
- ToolExecutor: concurrent execution of requested tool calls
- ModelBackend: the OpenAI chat completions client
"""

from aicodegen.agent.backend import ModelBackend
from aicodegen.agent.conversation import Conversation
from aicodegen.agent.core import Agent, LoopState
from aicodegen.agent.errors import AgentError, BackendError, SummarizationError
from aicodegen.agent.summarizer import Summarizer
from aicodegen.agent.tools_executor import ToolExecutor

__all__ = [
    "Agent",
    "AgentError",
    "BackendError",
    "Conversation",
    "LoopState",
    "ModelBackend",
    "SummarizationError",
    "Summarizer",
    "ToolExecutor",
]
