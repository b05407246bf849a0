"""
Agent Errors
============

Failures that end a turn. Tool failures never appear here: they are
turned into tool results and shown to the model instead.
"""


class AgentError(Exception):
    """Base class for turn-fatal failures."""


class BackendError(AgentError):
    """The model backend could not be reached or returned a malformed payload."""


class SummarizationError(AgentError):
    """Compacting an oversized conversation failed."""
