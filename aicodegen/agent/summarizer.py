"""
Conversation Summarizer
=======================

Keeps a session within its size budget.

Before every model call the agent asks the summarizer whether the
conversation has grown past the threshold. If it has, the whole
transcript is sent to the model as one request for a context-preserving
summary, and a new conversation is returned:

    system:    "This is a summarized version of the previous conversation..."
    assistant: <summary>

The old messages are dropped. Summarization is lossy; if it fails, the
turn fails with it rather than carrying on with an oversized conversation.
"""

from aicodegen.agent.conversation import Conversation
from aicodegen.agent.errors import BackendError, SummarizationError
from aicodegen.agent.messages import SystemMessage, UserMessage
from aicodegen.utils.config import DEFAULT_SUMMARIZE_THRESHOLD
from aicodegen.utils.logger import Logger

logger = Logger("Summarizer")

SUMMARY_SYSTEM_PROMPT = (
    "You are a helpful assistant that summarizes conversations. Summarize the "
    "following conversation while retaining all key points and context necessary "
    "for continuing the discussion."
)


class Summarizer:
    """
    Compacts conversations whose estimated size exceeds a threshold.

    Example:
        summarizer = Summarizer(backend, threshold=200_000)
        conversation = await summarizer.maybe_summarize(conversation)
    """

    def __init__(self, backend, threshold: int = DEFAULT_SUMMARIZE_THRESHOLD):
        """
        Args:
            backend: Model backend used for the summary request
            threshold: Size (in serialized characters) above which to compact
        """
        self.backend = backend
        self.threshold = threshold

    def needs_summary(self, conversation: Conversation) -> bool:
        return conversation.estimated_size() > self.threshold

    async def summarize(self, conversation: Conversation) -> Conversation:
        """
        Replace a conversation by a two-message summary of it.

        Args:
            conversation: The conversation to compact (left untouched)

        Returns:
            A new Conversation: compaction marker + assistant summary

        Raises:
            SummarizationError: If the backend fails, returns no summary, or
                returns one that does not shrink the conversation
        """
        logger.info("Summarizing conversation to reduce size...")

        request = [
            SystemMessage(SUMMARY_SYSTEM_PROMPT),
            UserMessage(
                "Please summarize the following conversation:\n\n"
                + conversation.transcript()
            ),
        ]

        try:
            reply = await self.backend.complete(request)
        except BackendError as e:
            raise SummarizationError(f"Error summarizing conversation: {e}") from e

        if not reply.content:
            raise SummarizationError("Error summarizing conversation: model returned no summary")

        compacted = Conversation.compacted(reply.content)
        original_size = conversation.estimated_size()
        if compacted.estimated_size() >= original_size:
            raise SummarizationError(
                "Error summarizing conversation: summary is not smaller than the conversation "
                f"({compacted.estimated_size()} >= {original_size} characters)"
            )
        return compacted

    async def maybe_summarize(self, conversation: Conversation) -> Conversation:
        """
        Return the conversation unchanged, or its summary when over threshold.
        """
        size = conversation.estimated_size()
        if size <= self.threshold:
            return conversation

        logger.warning(f"Size of conversation getting large: {size} characters")
        compacted = await self.summarize(conversation)
        logger.info(
            f"Conversation summarized to reduce size "
            f"({size} -> {compacted.estimated_size()} characters)"
        )
        return compacted
