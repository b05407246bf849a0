"""
Agent Core
==========

The agent loop: turns one user utterance into zero or more rounds of
tool calls and a final answer.

Agent Loop:
    User Message
         │
         ▼
    ┌──► Conversation over size threshold? ── Yes ──► Summarize (replace)
    │    │                                                  │
    │    ◄──────────────────────────────────────────────────┘
    │    ▼
    │    Model Request with Tools               (AWAITING_MODEL)
    │    │
    │    ┌─── Has Tool Calls? ───┐
    │    │                       │
    │    Yes                     No
    │    │                       │
    │    ▼                       ▼
    │    Execute Tools        Append + Return   (FINAL)
    │    (concurrently)
    │    │                                      (EXECUTING_TOOLS)
    │    ▼
    │    Append call + results in request order
    │    │
    └────┘

Failures of the model backend or of summarization end the turn: the
error and the whole conversation are logged, and process() returns None.
Messages appended before the failure stay in the conversation.
"""

from enum import Enum

from aicodegen.agent.conversation import Conversation
from aicodegen.agent.errors import AgentError
from aicodegen.agent.messages import AssistantMessage, SystemMessage, UserMessage
from aicodegen.agent.summarizer import Summarizer
from aicodegen.agent.tools_executor import ToolExecutor
from aicodegen.utils.config import DEFAULT_SUMMARIZE_THRESHOLD
from aicodegen.utils.logger import Logger

logger = Logger("Agent")


class LoopState(str, Enum):
    IDLE = "idle"
    AWAITING_MODEL = "awaiting_model"
    EXECUTING_TOOLS = "executing_tools"
    FINAL = "final"


class Agent:
    """
    Drives one interactive session.

    The agent owns its conversation, which starts with the selected system
    prompt and lives for the whole session.

    Example:
        agent = Agent(backend, system_prompt=get_prompt("default").text)

        reply = await agent.process("list files in ./src")
        if reply is None:
            ...  # the turn failed; ask the user again
        else:
            print(reply.content)
    """

    def __init__(
        self,
        backend,
        system_prompt: str,
        executor: ToolExecutor | None = None,
        summarizer: Summarizer | None = None,
        summarize_threshold: int = DEFAULT_SUMMARIZE_THRESHOLD
    ):
        """
        Args:
            backend: Model backend (see ModelBackend)
            system_prompt: Instructions that open the conversation
            executor: Tool executor, over the global registry by default
            summarizer: Summarizer, built on backend by default
            summarize_threshold: Size limit used by the default summarizer
        """
        self.backend = backend
        self.executor = executor or ToolExecutor()
        self.summarizer = summarizer or Summarizer(backend, summarize_threshold)
        self.conversation = Conversation([SystemMessage(system_prompt.strip())])
        self.state = LoopState.IDLE

    async def process(self, user_input: str) -> AssistantMessage | None:
        """
        Run one turn.

        Args:
            user_input: What the user typed

        Returns:
            The final assistant message, or None when the turn failed
        """
        logger.info(f"Processing message: {user_input[:50]}")
        self.conversation.append(UserMessage(user_input))

        try:
            return await self._run_turn()
        except AgentError as e:
            logger.error("Turn failed", e)
            logger.dump("Conversation:", self.conversation.to_openai_messages())
            self.state = LoopState.IDLE
            return None

    async def _run_turn(self) -> AssistantMessage:
        iterations = 0
        while True:
            self.conversation = await self.summarizer.maybe_summarize(self.conversation)

            self.state = LoopState.AWAITING_MODEL
            reply = await self.backend.complete(
                self.conversation.messages,
                tools=self.executor.declarations()
            )

            if not reply.has_tool_calls:
                self.state = LoopState.FINAL
                self.conversation.append(reply)
                if reply.is_empty:
                    logger.warning("Model returned neither content nor tool calls")
                else:
                    logger.info(f"Generated response ({len(reply.content)} chars)")
                return reply

            iterations += 1
            self.state = LoopState.EXECUTING_TOOLS
            logger.debug(f"Tool iteration {iterations}")

            self.conversation.append(reply)
            results = await self.executor.execute_all(list(reply.tool_calls))
            for result in results:
                self.conversation.append(result.to_message())
