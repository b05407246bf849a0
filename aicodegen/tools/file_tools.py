"""
File-System Tools
=================

Tools that let the model inspect and change the local file system:

    read_file              text of a file (PDF/ODT/DOCX/XML aware)
    list_files             immediate entries of a directory
    find_files             recursive search by file-name substring
    list_files_recursive   every file below a directory, minus excluded paths
    edit_file              literal find/replace-all
    edit_file_regex        regex find/replace-all
    write_file             create or overwrite a file
    create_file            create or overwrite a file
    create_directory       recursive mkdir

The blocking file-system work runs in worker threads, so several tool
calls from one model response proceed concurrently. Writes are immediate;
there is no locking, and two calls writing the same file in one turn race
(last write wins).
"""

import asyncio
import os
import re
from pathlib import Path

from aicodegen.tools import Tool, ToolResult
from aicodegen.utils.extract_text import ExtractionError, load_text
from aicodegen.utils.logger import Logger

logger = Logger("FileTools")

DEFAULT_EXCLUDE_PATHS = ["*/bin", "*/lib", "*/obj", "*/node_modules", "*/.git", "*/.svn"]


# ==============================================================================
# Helpers
# ==============================================================================

def _walk_files(root: Path, exclude: list[re.Pattern] | None = None):
    """
    Yield every file below root, depth first, entries sorted by name.

    Excluded entries (files or directories) are skipped entirely.

    Raises:
        OSError: If root (or a subdirectory) cannot be read
    """
    with os.scandir(root) as it:
        entries = sorted(it, key=lambda entry: entry.name)

    for entry in entries:
        entry_path = root / entry.name
        if exclude and any(pattern.fullmatch(entry_path.as_posix()) for pattern in exclude):
            continue
        if entry.is_dir():
            yield from _walk_files(entry_path, exclude)
        elif entry.is_file():
            yield entry_path


def glob_to_regex(pattern: str) -> re.Pattern:
    """
    Translate an exclusion glob into a regex matched against a whole path.

    "*/" matches any leading directories (including none), "*" matches a
    run of characters within one path segment, everything else is literal.

        glob_to_regex("*/node_modules").fullmatch("/repo/web/node_modules")  # match
        glob_to_regex("*/lib").fullmatch("/repo/mylib")                       # no match
    """
    parts = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("*/", i):
            parts.append("(?:.*/)?")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(parts))


# Replacement references: $$, $&, $1..$99. Everything else is literal text.
_REPLACEMENT_REF = re.compile(r"\$(\$|&|\d{1,2})")


def _replacer(replacement: str):
    """
    Build a re.sub callback for a JavaScript-style replacement string.

    "$1" inserts group 1, "$&" the whole match and "$$" a dollar sign.
    Backslashes are copied as-is: "a\\nb" stays a backslash followed by n.
    A two-digit reference past the last group reads as one digit ("$12"
    with one group is group 1 then "2"); references to missing groups
    stay literal.
    """
    def replace(match: re.Match) -> str:
        groups = match.re.groups

        def substitute(ref: re.Match) -> str:
            token = ref.group(1)
            if token == "$":
                return "$"
            if token == "&":
                return match.group(0)
            if 0 < int(token) <= groups:
                return match.group(int(token)) or ""
            if len(token) == 2 and 0 < int(token[0]) <= groups:
                return (match.group(int(token[0])) or "") + token[1]
            return ref.group(0)

        return _REPLACEMENT_REF.sub(substitute, replacement)

    return replace


def _write_text(path: Path, content: str) -> None:
    """Write content exactly as given, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def _read_text(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


# ==============================================================================
# Tool: Read File
# ==============================================================================

async def _read_file(params: dict) -> ToolResult:
    path = params["path"]
    logger.info(f"Reading file: {path}")

    try:
        return ToolResult.ok(await asyncio.to_thread(load_text, path))
    except ExtractionError as e:
        return ToolResult.fail(str(e))


# ==============================================================================
# Tool: List Files
# ==============================================================================

def _list_entries(path: str) -> str:
    entries = sorted(os.listdir(Path(path).resolve()))
    return f"Files in {path}:\n" + "\n".join(entries)


async def _list_files(params: dict) -> ToolResult:
    path = params["path"]
    logger.info(f"Listing dir: {path}")

    try:
        return ToolResult.ok(await asyncio.to_thread(_list_entries, path))
    except OSError as e:
        return ToolResult.fail(f"Error listing files: {e}")


# ==============================================================================
# Tool: Find Files
# ==============================================================================

def _find(path: str, needle: str) -> str:
    matches = [
        str(file_path)
        for file_path in _walk_files(Path(path).resolve())
        if needle in file_path.name
    ]
    if not matches:
        return f'No files found matching "{needle}"'
    return "Matching files:\n" + "\n".join(matches)


async def _find_files(params: dict) -> ToolResult:
    path = params.get("path") or "."
    needle = params["filenameSearch"]
    logger.info(f"Finding files like {needle} in dir: {path}")

    try:
        return ToolResult.ok(await asyncio.to_thread(_find, path, needle))
    except OSError as e:
        return ToolResult.fail(f"Error finding files: {e}")


# ==============================================================================
# Tool: List Files Recursive
# ==============================================================================

def _list_recursive(path: str, exclude_paths: list[str]) -> str:
    exclude = [glob_to_regex(pattern) for pattern in exclude_paths]
    files = [str(file_path) for file_path in _walk_files(Path(path).resolve(), exclude)]
    return f"Files in {path} (including subdirectories):\n" + "\n".join(files)


async def _list_files_recursive(params: dict) -> ToolResult:
    path = params["path"]
    exclude_paths = params.get("excludePaths") or DEFAULT_EXCLUDE_PATHS
    logger.info(f"Listing files recursively in: {path}")

    try:
        return ToolResult.ok(await asyncio.to_thread(_list_recursive, path, exclude_paths))
    except OSError as e:
        return ToolResult.fail(f"Error listing files recursively: {e}")


# ==============================================================================
# Tools: Edit File / Edit File Regex
# ==============================================================================

def _replace_literal(path: str, find: str, replace: str) -> str:
    full_path = Path(path).resolve()
    content = _read_text(full_path)
    _write_text(full_path, content.replace(find, replace))
    return f'Replaced all occurrences of "{find}" with "{replace}" in {path}'


async def _edit_file(params: dict) -> ToolResult:
    path, find, replace = params["path"], params["find"], params["replace"]
    logger.info(f"Editing file: {path}")

    if find == "":
        return ToolResult.fail("Error editing file: find string must not be empty")

    try:
        return ToolResult.ok(await asyncio.to_thread(_replace_literal, path, find, replace))
    except (OSError, ValueError) as e:
        return ToolResult.fail(f"Error editing file: {e}")


def _replace_regex(path: str, find: str, replace: str) -> str:
    regex = re.compile(find, re.MULTILINE)

    full_path = Path(path).resolve()
    content = _read_text(full_path)
    _write_text(full_path, regex.sub(_replacer(replace), content))
    return f'Replaced all occurrences of "{find}" with "{replace}" in {path}'


async def _edit_file_regex(params: dict) -> ToolResult:
    path, find, replace = params["path"], params["find"], params["replace"]
    logger.info(f"Editing (regex) file: {path}")

    try:
        return ToolResult.ok(await asyncio.to_thread(_replace_regex, path, find, replace))
    except re.error as e:
        return ToolResult.fail(f"Error editing file: invalid pattern: {e}")
    except (OSError, ValueError) as e:
        return ToolResult.fail(f"Error editing file: {e}")


# ==============================================================================
# Tools: Write File / Create File
# ==============================================================================

async def _write_file(params: dict) -> ToolResult:
    path, content = params["path"], params["content"]
    logger.info(f"Writing file: {path}")

    try:
        await asyncio.to_thread(_write_text, Path(path), content)
    except OSError as e:
        return ToolResult.fail(f"Error writing to file: {e}")
    return ToolResult.ok(f"Wrote {len(content)} characters to {path}")


async def _create_file(params: dict) -> ToolResult:
    path, content = params["path"], params["content"]
    logger.info(f"Creating file: {path}")

    try:
        await asyncio.to_thread(_write_text, Path(path), content)
    except OSError as e:
        return ToolResult.fail(f"Error creating file: {e}")
    return ToolResult.ok(f"File created: {path}")


# ==============================================================================
# Tool: Create Directory
# ==============================================================================

def _make_directory(path: str) -> str:
    directory = Path(path)
    if directory.is_dir():
        return f'Directory "{path}" already exists.'
    directory.mkdir(parents=True)
    return f'Directory "{path}" created successfully.'


async def _create_directory(params: dict) -> ToolResult:
    path = params["path"]
    logger.info(f"Creating directory: {path}")

    try:
        return ToolResult.ok(await asyncio.to_thread(_make_directory, path))
    except OSError as e:
        return ToolResult.fail(f"Error creating directory: {e}")


# ==============================================================================
# Declarations
# ==============================================================================

_PATH = {"type": "string", "description": "Path to the file"}

FILE_TOOLS = [
    Tool(
        name="read_file",
        description="Read the contents of a file",
        parameters={
            "type": "object",
            "properties": {"path": _PATH},
            "required": ["path"]
        },
        execute=_read_file
    ),
    Tool(
        name="list_files",
        description="List the files in a directory",
        parameters={
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "Path to the directory"}
            },
            "required": ["path"]
        },
        execute=_list_files
    ),
    Tool(
        name="find_files",
        description="Find files whose name contains the search text, searching subdirectories",
        parameters={
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "Path to run the find from",
                    "default": "."
                },
                "filenameSearch": {"type": "string", "description": "File name to look for"}
            },
            "required": ["filenameSearch"]
        },
        execute=_find_files
    ),
    Tool(
        name="list_files_recursive",
        description="List all files in a directory and its subdirectories, excluding certain paths",
        parameters={
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "Path to the directory"},
                "excludePaths": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": (
                        "Glob patterns of paths to skip "
                        f"(default: {', '.join(DEFAULT_EXCLUDE_PATHS)})"
                    )
                }
            },
            "required": ["path"]
        },
        execute=_list_files_recursive
    ),
    Tool(
        name="edit_file",
        description="Find and replace a string in a file",
        parameters={
            "type": "object",
            "properties": {
                "path": _PATH,
                "find": {"type": "string", "description": "Exact text to find"},
                "replace": {"type": "string", "description": "Replacement text"}
            },
            "required": ["path", "find", "replace"]
        },
        execute=_edit_file
    ),
    Tool(
        name="edit_file_regex",
        description=(
            "Find and replace a regex in a file - preferred to edit_file "
            "for more complex replacements"
        ),
        parameters={
            "type": "object",
            "properties": {
                "path": _PATH,
                "find": {"type": "string", "description": "Regex pattern to find"},
                "replace": {
                    "type": "string",
                    "description": "Replacement text; $1 or \\1 refer to capture groups"
                }
            },
            "required": ["path", "find", "replace"]
        },
        execute=_edit_file_regex
    ),
    Tool(
        name="write_file",
        description="Write text content to a file (creates or overwrites)",
        parameters={
            "type": "object",
            "properties": {
                "path": _PATH,
                "content": {"type": "string", "description": "The full file content"}
            },
            "required": ["path", "content"]
        },
        execute=_write_file
    ),
    Tool(
        name="create_file",
        description="Creates a new file with the given content",
        parameters={
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "Path where the file should be created"},
                "content": {"type": "string", "description": "The contents of the new file"}
            },
            "required": ["path", "content"]
        },
        execute=_create_file
    ),
    Tool(
        name="create_directory",
        description="Create a new directory at the specified path",
        parameters={
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "Directory path to create"}
            },
            "required": ["path"]
        },
        execute=_create_directory
    ),
]
