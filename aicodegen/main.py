"""
aicodegen - Command Line Entry Point
====================================

    aicodegen              Start the interactive assistant
    aicodegen init         Set your OpenAI API key
    aicodegen use <name>   Use a named prompt (e.g. sample)
    aicodegen help         Show this help message

Starting a session:
1. Loads configuration (fails fast without an API key)
2. Creates the model backend and registers the tools
3. Creates the agent with the selected system prompt
4. Reads lines from the terminal until EOF or Ctrl+C
"""

import asyncio
import json

import click

from aicodegen.agent import Agent, ModelBackend
from aicodegen.agent.messages import AssistantMessage
from aicodegen.agent.prompts import SystemPrompt, available_prompts, get_prompt
from aicodegen.tools import register_builtin_tools
from aicodegen.tools.document_tools import set_summary_backend
from aicodegen.utils.config import Config, get_config
from aicodegen.utils.credentials import save_api_key
from aicodegen.utils.logger import Logger

main_logger = Logger("Main")

USER_PROMPT = click.style("You", fg="bright_blue") + ": "


def build_agent(prompt: SystemPrompt, config: Config) -> Agent:
    """Wire backend, tools and agent together for one session."""
    backend = ModelBackend.from_config(config)
    set_summary_backend(backend)
    register_builtin_tools()

    return Agent(
        backend,
        system_prompt=prompt.text,
        summarize_threshold=config.agent.summarize_threshold
    )


def _print_reply(reply: AssistantMessage | None) -> None:
    if reply is None:
        click.echo(f"{click.style('Error', fg='bright_red')}: Empty response from model.")
    elif reply.is_empty:
        error = click.style("Error", fg="bright_red")
        click.echo(f"{error}: Unexpected response from model {json.dumps(reply.to_openai())}.")
    else:
        click.echo(f"{click.style('GPT', fg='bright_yellow')}: {reply.content}")


def chat(agent: Agent) -> None:
    """
    Interactive loop: one turn per non-empty line.

    A failed turn prints an error and the loop continues with the
    conversation as it was.
    """
    with asyncio.Runner() as runner:
        while True:
            try:
                line = input(USER_PROMPT)
            except (EOFError, KeyboardInterrupt):
                click.echo("\nSession ended.")
                return

            user_input = line.strip()
            if not user_input:
                continue

            try:
                reply = runner.run(agent.process(user_input))
            except KeyboardInterrupt:
                click.echo("\nSession ended.")
                return
            _print_reply(reply)


def _start_session(prompt: SystemPrompt) -> None:
    try:
        config = get_config()
    except ValueError as e:
        click.echo(f"{click.style('Error', fg='bright_red')}: {e}", err=True)
        raise SystemExit(1)

    main_logger.info(f"Starting session with prompt: {prompt.name}")
    agent = build_agent(prompt, config)

    click.echo(prompt.start_message)
    chat(agent)


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """aicodegen - Your OpenAI-powered coding assistant.

    Run without a command to start the interactive assistant.
    """
    if ctx.invoked_subcommand is None:
        _start_session(get_prompt("default"))


@cli.command()
def init() -> None:
    """Set your OpenAI API key."""
    key = click.prompt("Enter your OpenAI API key", hide_input=True)
    try:
        path = save_api_key(key)
    except (ValueError, OSError) as e:
        click.echo(f"{click.style('Error', fg='bright_red')}: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"API key saved to {path}")


@cli.command()
@click.argument("name")
def use(name: str) -> None:
    """Use a named prompt (e.g. sample)."""
    try:
        prompt = get_prompt(name)
    except KeyError:
        click.echo(
            f'Unknown prompt "{name}". Available prompts: {", ".join(available_prompts())}',
            err=True
        )
        raise SystemExit(1)
    _start_session(prompt)


@cli.command("help")
@click.pass_context
def help_command(ctx: click.Context) -> None:
    """Show this help message."""
    click.echo(ctx.parent.get_help())


if __name__ == "__main__":
    cli()
