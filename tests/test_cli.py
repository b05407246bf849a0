"""CLI tests via Click's CliRunner.

The model backend is replaced by a scripted one, so a whole interactive
session can be driven through stdin.
"""

import pytest
from click.testing import CliRunner

from aicodegen import main
from aicodegen.agent.core import Agent
from aicodegen.agent.errors import BackendError
from aicodegen.agent.messages import AssistantMessage
from aicodegen.agent.prompts import DEFAULT_START_MESSAGE, PROMPTS
from aicodegen.utils.credentials import load_api_key

from conftest import ScriptedBackend, final


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def scripted_session(monkeypatch, executor):
    """Make sessions use a scripted backend; returns the agents created."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr("aicodegen.utils.config.load_dotenv", lambda: None)
    agents = []

    def install(*replies):
        def build_agent(prompt, config):
            agent = Agent(ScriptedBackend(*replies), prompt.text, executor=executor)
            agents.append(agent)
            return agent

        monkeypatch.setattr(main, "build_agent", build_agent)
        return agents

    return install


def test_chat_session(runner, scripted_session):
    agents = scripted_session(final("Hi! How can I help?"))

    result = runner.invoke(main.cli, [], input="hello\n")

    assert result.exit_code == 0
    assert DEFAULT_START_MESSAGE in result.output
    assert "GPT: Hi! How can I help?" in result.output
    assert "Session ended." in result.output
    assert agents[0].conversation[0].content == PROMPTS["default"].text.strip()


def test_blank_lines_are_ignored(runner, scripted_session):
    agents = scripted_session(final("ok"))

    result = runner.invoke(main.cli, [], input="\n   \nhi\n")

    assert result.exit_code == 0
    assert [m.role.value for m in agents[0].conversation] == ["system", "user", "assistant"]


def test_failed_turn_reports_error_and_continues(runner, scripted_session):
    scripted_session(BackendError("boom"), final("second try worked"))

    result = runner.invoke(main.cli, [], input="first\nsecond\n")

    assert result.exit_code == 0
    assert "Error: Empty response from model." in result.output
    assert "GPT: second try worked" in result.output


def test_unexpected_response_is_reported(runner, scripted_session):
    scripted_session(AssistantMessage())

    result = runner.invoke(main.cli, [], input="hi\n")

    assert "Error: Unexpected response from model" in result.output


def test_use_named_prompt(runner, scripted_session):
    agents = scripted_session(final("ready"))

    result = runner.invoke(main.cli, ["use", "sample"], input="go\n")

    assert result.exit_code == 0
    assert PROMPTS["sample"].start_message in result.output
    assert agents[0].conversation[0].content == PROMPTS["sample"].text.strip()


def test_use_unknown_prompt_exits_nonzero(runner, scripted_session):
    agents = scripted_session()

    result = runner.invoke(main.cli, ["use", "nope"])

    assert result.exit_code == 1
    assert 'Unknown prompt "nope". Available prompts: default, sample' in result.output
    assert agents == []


def test_unknown_command_exits_nonzero(runner):
    result = runner.invoke(main.cli, ["frobnicate"])

    assert result.exit_code != 0
    assert "frobnicate" in result.output


def test_missing_api_key_is_fatal(runner, monkeypatch):
    monkeypatch.setattr("aicodegen.utils.config.load_dotenv", lambda: None)

    result = runner.invoke(main.cli, [])

    assert result.exit_code == 1
    assert "aicodegen init" in result.output


def test_init_stores_api_key(runner):
    result = runner.invoke(main.cli, ["init"], input="sk-from-prompt\n")

    assert result.exit_code == 0
    assert "API key saved to" in result.output
    assert load_api_key() == "sk-from-prompt"


@pytest.mark.parametrize("args", [["help"], ["--help"], ["-h"]])
def test_help(runner, args):
    result = runner.invoke(main.cli, args)

    assert result.exit_code == 0
    assert "init" in result.output
    assert "use" in result.output
