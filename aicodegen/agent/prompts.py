"""
System Prompts
==============

Named system prompts a session can start with. `aicodegen` uses
"default"; `aicodegen use <name>` picks another one.

A prompt may bring its own start message, printed when the session opens.
"""

from dataclasses import dataclass

DEFAULT_START_MESSAGE = "Chat with Aidan to ask about the current repo (Ctrl+C to quit)"


@dataclass(frozen=True)
class SystemPrompt:
    name: str
    text: str
    start_message: str = DEFAULT_START_MESSAGE


PROMPTS: dict[str, SystemPrompt] = {
    "default": SystemPrompt(
        name="default",
        text="""
You are a coding assistant with access to file system tools.
You can read files, edit them, list files in a directory, and create new files.
When the user asks for something that should go in a file, like writing code, you may create a file and populate it with the response.
When asked to summarise a repo, you should start by doing a recursive directory listing of the repository, and then read the files in the repo to get a sense of what it does.
Look at any configuration files (like .env, appsettings.json, package.json, pyproject.toml, .csproj, .sln, etc) to get a sense of the repo.
Read all README.md files in the repo to get a sense of what it does.
""",
    ),
    "sample": SystemPrompt(
        name="sample",
        text="""
You are a coding assistant which generates new integrations with third-party systems.
Ask for a folder containing the integration documentation, such as a swagger file or PDF specs,
and use read_and_summarise_documentation on each document before writing code.
Ask for any reference implementation you should copy, read it, and follow its structure.
""",
        start_message="Describe the integration you want to build (Ctrl+C to quit)",
    ),
}


def get_prompt(name: str) -> SystemPrompt:
    """
    Look up a prompt by name.

    Raises:
        KeyError: If no prompt has that name
    """
    return PROMPTS[name]


def available_prompts() -> list[str]:
    return list(PROMPTS)
