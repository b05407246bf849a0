"""Tests for the file-system tools, executed through the registry."""

import zipfile
from pathlib import Path

import pytest

from aicodegen.tools.file_tools import DEFAULT_EXCLUDE_PATHS, glob_to_regex


async def run(registry, name, **params) -> str:
    result = await registry.execute(name, params)
    return result.to_message()


# ---------------------------------------------------------------------------
# read_file / write_file / create_file
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_write_then_read_round_trip(registry, workspace):
    content = "line one\r\nline two\n\ttabbed ünïcode\n"

    written = await run(registry, "write_file", path="notes/todo.txt", content=content)
    assert written == f"Wrote {len(content)} characters to notes/todo.txt"

    assert await run(registry, "read_file", path="notes/todo.txt") == content


@pytest.mark.asyncio
async def test_create_file_round_trip_and_overwrite(registry, workspace):
    assert await run(registry, "create_file", path="a.py", content="x = 1\n") == "File created: a.py"
    await run(registry, "create_file", path="a.py", content="x = 2\n")

    assert await run(registry, "read_file", path="a.py") == "x = 2\n"


@pytest.mark.asyncio
async def test_write_file_is_idempotent(registry, workspace):
    await run(registry, "write_file", path="same.txt", content="abc")
    await run(registry, "write_file", path="same.txt", content="abc")

    assert (workspace / "same.txt").read_text() == "abc"


@pytest.mark.asyncio
async def test_read_missing_file_returns_error_text(registry, workspace):
    message = await run(registry, "read_file", path="does/not/exist.txt")

    assert message.startswith("Error reading file:")


@pytest.mark.asyncio
async def test_read_file_whose_text_looks_like_an_error(registry, workspace):
    (workspace / "log.txt").write_text("Error reading file: disk full\n")

    result = await registry.execute("read_file", {"path": "log.txt"})

    assert result.success
    assert result.to_message() == "Error reading file: disk full\n"


@pytest.mark.asyncio
async def test_read_docx_extracts_paragraphs(registry, workspace):
    document = (
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        "<w:body>"
        "<w:p><w:r><w:t>Hello</w:t></w:r><w:r><w:t> world</w:t></w:r></w:p>"
        "<w:p><w:r><w:t>Second paragraph</w:t></w:r></w:p>"
        "</w:body></w:document>"
    )
    with zipfile.ZipFile(workspace / "spec.docx", "w") as archive:
        archive.writestr("word/document.xml", document)

    assert await run(registry, "read_file", path="spec.docx") == "Hello world\nSecond paragraph"


@pytest.mark.asyncio
async def test_read_odt_extracts_paragraphs(registry, workspace):
    content = (
        '<office:document-content '
        'xmlns:office="urn:oasis:names:tc:opendocument:xmlns:office:1.0" '
        'xmlns:text="urn:oasis:names:tc:opendocument:xmlns:text:1.0">'
        "<office:body><office:text>"
        "<text:h>Title</text:h>"
        "<text:p>Body <text:span>text</text:span></text:p>"
        "</office:text></office:body></office:document-content>"
    )
    with zipfile.ZipFile(workspace / "spec.odt", "w") as archive:
        archive.writestr("content.xml", content)

    assert await run(registry, "read_file", path="spec.odt") == "Title\nBody text"


@pytest.mark.asyncio
async def test_read_broken_docx_returns_error_text(registry, workspace):
    (workspace / "broken.docx").write_text("not a zip")

    message = await run(registry, "read_file", path="broken.docx")

    assert message.startswith("Error reading file:")


# ---------------------------------------------------------------------------
# list_files / find_files / list_files_recursive
# ---------------------------------------------------------------------------

@pytest.fixture
def tree(workspace) -> Path:
    for relative in [
        "src/app.py",
        "src/util/helpers.py",
        "src/util/app_config.json",
        "node_modules/pkg/index.js",
        "web/node_modules/dep/app.js",
        ".git/HEAD",
        "mylib/keep.txt",
        "README.md",
    ]:
        path = workspace / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(relative)
    return workspace


@pytest.mark.asyncio
async def test_list_files_lists_immediate_entries(registry, tree):
    message = await run(registry, "list_files", path="./src")

    assert message == "Files in ./src:\napp.py\nutil"


@pytest.mark.asyncio
async def test_list_files_missing_directory(registry, workspace):
    message = await run(registry, "list_files", path="nope")

    assert message.startswith("Error listing files:")


@pytest.mark.asyncio
async def test_find_files_matches_name_substring_recursively(registry, tree):
    message = await run(registry, "find_files", path="src", filenameSearch="app")

    lines = message.splitlines()
    assert lines[0] == "Matching files:"
    assert sorted(Path(line).relative_to(tree).as_posix() for line in lines[1:]) == [
        "src/app.py",
        "src/util/app_config.json",
    ]


@pytest.mark.asyncio
async def test_find_files_defaults_to_current_directory(registry, tree):
    message = await run(registry, "find_files", filenameSearch="HEAD")

    assert message.splitlines()[1] == str(tree / ".git" / "HEAD")


@pytest.mark.asyncio
async def test_find_files_with_no_match_is_not_an_error(registry, tree):
    result = await registry.execute("find_files", {"path": ".", "filenameSearch": "xyz"})

    assert result.success
    assert result.to_message() == 'No files found matching "xyz"'


@pytest.mark.asyncio
async def test_list_files_recursive_skips_default_excludes(registry, tree):
    message = await run(registry, "list_files_recursive", path=".")

    lines = message.splitlines()
    assert lines[0] == "Files in . (including subdirectories):"
    listed = sorted(Path(line).relative_to(tree).as_posix() for line in lines[1:])
    assert listed == [
        "README.md",
        "mylib/keep.txt",
        "src/app.py",
        "src/util/app_config.json",
        "src/util/helpers.py",
    ]


@pytest.mark.asyncio
async def test_list_files_recursive_custom_excludes(registry, tree):
    message = await run(registry, "list_files_recursive", path="src", excludePaths=["*/util"])

    listed = [Path(line).relative_to(tree).as_posix() for line in message.splitlines()[1:]]
    assert listed == ["src/app.py"]


def test_glob_to_regex_matches_whole_segments():
    node_modules = glob_to_regex("*/node_modules")
    lib = glob_to_regex("*/lib")
    logs = glob_to_regex("*/*.log")

    assert node_modules.fullmatch("/repo/web/node_modules")
    assert node_modules.fullmatch("node_modules")
    assert not node_modules.fullmatch("/repo/node_modules_backup")
    assert lib.fullmatch("/repo/lib")
    assert not lib.fullmatch("/repo/mylib")
    assert logs.fullmatch("/repo/build/out.log")
    assert not logs.fullmatch("/repo/out.log.txt")


def test_default_excludes_cover_vcs_and_dependency_dirs():
    assert {"*/.git", "*/.svn", "*/node_modules"} <= set(DEFAULT_EXCLUDE_PATHS)


# ---------------------------------------------------------------------------
# edit_file / edit_file_regex
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_edit_file_replaces_all_literal_occurrences(registry, workspace):
    (workspace / "main.py").write_text("a.b = 1\na.b += a.b\n")

    message = await run(registry, "edit_file", path="main.py", find="a.b", replace="value")

    assert message == 'Replaced all occurrences of "a.b" with "value" in main.py'
    assert (workspace / "main.py").read_text() == "value = 1\nvalue += value\n"


@pytest.mark.asyncio
async def test_edit_file_is_idempotent(registry, workspace):
    (workspace / "config.ini").write_text("debug=true\nverbose=true\n")
    params = {"path": "config.ini", "find": "true", "replace": "false"}

    await registry.execute("edit_file", params)
    once = (workspace / "config.ini").read_text()
    await registry.execute("edit_file", params)

    assert (workspace / "config.ini").read_text() == once == "debug=false\nverbose=false\n"


@pytest.mark.asyncio
async def test_edit_file_treats_find_as_literal(registry, workspace):
    (workspace / "pattern.txt").write_text("a+b a+b aab")

    await run(registry, "edit_file", path="pattern.txt", find="a+b", replace="c")

    assert (workspace / "pattern.txt").read_text() == "c c aab"


@pytest.mark.asyncio
async def test_edit_file_missing_file(registry, workspace):
    message = await run(registry, "edit_file", path="ghost.py", find="a", replace="b")

    assert message.startswith("Error editing file:")


@pytest.mark.asyncio
async def test_edit_file_rejects_empty_find(registry, workspace):
    (workspace / "f.txt").write_text("abc")

    message = await run(registry, "edit_file", path="f.txt", find="", replace="x")

    assert message.startswith("Error editing file:")
    assert (workspace / "f.txt").read_text() == "abc"


@pytest.mark.asyncio
async def test_edit_file_regex_global_multiline(registry, workspace):
    (workspace / "deps.txt").write_text("requests==2.0\nclick==7.0\n")

    await run(registry, "edit_file_regex", path="deps.txt", find=r"^(\w+)==.*$", replace="$1>=1.0")

    assert (workspace / "deps.txt").read_text() == "requests>=1.0\nclick>=1.0\n"


@pytest.mark.asyncio
async def test_edit_file_regex_accepts_dollar_group_references(registry, workspace):
    (workspace / "names.txt").write_text("Doe, John\nRoe, Jane\n")

    await run(registry, "edit_file_regex", path="names.txt", find=r"(\w+), (\w+)", replace="$2 $1 ($&) $$")

    assert (workspace / "names.txt").read_text() == (
        "John Doe (Doe, John) $\nJane Roe (Roe, Jane) $\n"
    )


@pytest.mark.asyncio
async def test_edit_file_regex_writes_backslashes_literally(registry, workspace):
    (workspace / "main.py").write_text('print("X")\nhome = "HOME"\n')

    first = await run(registry, "edit_file_regex", path="main.py", find="X", replace="a\\nb")
    second = await run(registry, "edit_file_regex", path="main.py", find="HOME", replace="C:\\Users\\dev")

    assert first.startswith("Replaced all occurrences")
    assert second.startswith("Replaced all occurrences")
    assert (workspace / "main.py").read_text() == 'print("a\\nb")\nhome = "C:\\Users\\dev"\n'


@pytest.mark.asyncio
async def test_edit_file_regex_two_digit_reference_past_last_group(registry, workspace):
    (workspace / "ids.txt").write_text("id=7 $9\n")

    await run(registry, "edit_file_regex", path="ids.txt", find=r"id=(\d)", replace="$12")

    assert (workspace / "ids.txt").read_text() == "72 $9\n"


@pytest.mark.asyncio
async def test_edit_file_regex_is_case_sensitive(registry, workspace):
    (workspace / "case.txt").write_text("Foo foo FOO")

    await run(registry, "edit_file_regex", path="case.txt", find="foo", replace="bar")

    assert (workspace / "case.txt").read_text() == "Foo bar FOO"


@pytest.mark.asyncio
async def test_edit_file_regex_bad_pattern_returns_error(registry, workspace):
    (workspace / "f.txt").write_text("abc")

    result = await registry.execute("edit_file_regex", {"path": "f.txt", "find": "(unclosed", "replace": "x"})

    assert not result.success
    assert result.to_message().startswith("Error editing file:")
    assert (workspace / "f.txt").read_text() == "abc"


# ---------------------------------------------------------------------------
# create_directory
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_directory_reports_created_then_exists(registry, workspace):
    first = await run(registry, "create_directory", path="a/b/c")
    second = await run(registry, "create_directory", path="a/b/c")

    assert first == 'Directory "a/b/c" created successfully.'
    assert second == 'Directory "a/b/c" already exists.'
    assert (workspace / "a" / "b" / "c").is_dir()


@pytest.mark.asyncio
async def test_create_directory_over_a_file_is_an_error(registry, workspace):
    (workspace / "taken").write_text("")

    message = await run(registry, "create_directory", path="taken")

    assert message.startswith("Error creating directory:")
