"""
Documentation Tools
===================

read_and_summarise_documentation reads an integration document (API spec,
functional spec, mapping sheet...) and asks the model for a summary that
other agents can write code from. Large documents then cost a summary's
worth of context instead of their full text.

The tool needs a model backend, injected at startup:

    from aicodegen.tools.document_tools import set_summary_backend
    set_summary_backend(backend)
"""

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

from aicodegen.agent.errors import BackendError
from aicodegen.agent.messages import SystemMessage, UserMessage
from aicodegen.tools import Tool, ToolResult
from aicodegen.utils.extract_text import ExtractionError, load_text
from aicodegen.utils.logger import Logger

if TYPE_CHECKING:
    from aicodegen.agent.backend import ModelBackend

logger = Logger("DocumentTools")

DOCUMENT_SUMMARY_PROMPT = (
    "You are a helpful assistant that summarizes files. The files are to understand "
    "how to integrate with a third party. The summary will be used by AI agents to "
    "write code that correctly conforms to the information found in the files. These "
    "may be API specs or functional specs (e.g., to help with mapping)."
)

_summary_backend: "ModelBackend | None" = None


def set_summary_backend(backend: "ModelBackend | None") -> None:
    """Set the backend used to summarise documents."""
    global _summary_backend
    _summary_backend = backend


async def _read_and_summarise(params: dict) -> ToolResult:
    path = params["path"]
    logger.info(f"Summarising file: {path}")

    if _summary_backend is None:
        return ToolResult.fail("Error summarising file: no model backend configured")

    full_path = str(Path(path).resolve())
    try:
        text = await asyncio.to_thread(load_text, full_path)
    except ExtractionError as e:
        return ToolResult.fail(f"Error summarising file: {e}")

    request = [
        SystemMessage(DOCUMENT_SUMMARY_PROMPT),
        UserMessage(
            "Please summarize the key points relevant for an AI Agent implementing "
            f"integration code from the following file content:\n\n{text}"
        ),
    ]

    try:
        reply = await _summary_backend.complete(request)
    except BackendError as e:
        logger.error(f"Error summarizing file: {path}", e)
        return ToolResult.fail(f"Error summarising file: {e}")

    if not reply.content:
        return ToolResult.fail("Error summarising file: model returned no summary")
    return ToolResult.ok(reply.content)


DOCUMENT_TOOLS = [
    Tool(
        name="read_and_summarise_documentation",
        description="Read the contents of a file, and summarise it for use in code generation",
        parameters={
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "Path to the file"}
            },
            "required": ["path"]
        },
        execute=_read_and_summarise
    ),
]
