"""
aicodegen - Terminal Coding Assistant
=====================================

A command-line assistant that chats with an OpenAI model and lets it use
a small set of file-system tools (read, list, search, edit, create) in the
current repository.

This package provides:
- Agent loop that runs tool calls until the model gives a final answer
- Automatic summarization when the conversation grows too large
- File tools with document text extraction (PDF, ODT, DOCX)
- The `aicodegen` command line interface
"""

__version__ = "1.0.0"
