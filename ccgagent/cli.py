"""CLI for CCG - run the MCP server or call the backends directly."""

from __future__ import annotations

import asyncio
import sys

import click

from ccgagent import __version__
from ccgagent.schemas import Backend


@click.group()
@click.version_option(version=__version__, prog_name="ccgagent")
def main() -> None:
    """CCG - Codex and Gemini as MCP tools.

    Routes coding tasks to Codex (backend) or Gemini (frontend) through
    codeagent-wrapper, and generates images through nanobanana-wrapper.
    """
    pass


@main.command()
def mcp() -> None:
    """Run the MCP server for Claude integration.

    \b
    Configure in .mcp.json:
        {
            "mcpServers": {
                "ccg": {
                    "command": "ccgagent",
                    "args": ["mcp"]
                }
            }
        }
    """
    from mcp_ccgagent.server import main as run_server

    run_server()


@main.command()
@click.argument("task")
def score(task: str) -> None:
    """Show how smart routing would classify a task.

    \b
    Example:
        ccgagent score "fix the REST API caching bug"
    """
    from ccgagent.classifier import score_task, select_backend
    from ccgagent.config import get_settings

    route_score = score_task(task, get_settings())
    backend = select_backend(route_score)

    click.echo(f"Frontend score: {route_score.frontend_score}")
    click.echo(f"Backend score: {route_score.backend_score}")
    click.echo(f"Selected model: {backend.display_name}")


def _run_tool(name: str, arguments: dict) -> None:
    from ccgagent.config import get_settings
    from ccgagent.dispatcher import dispatch

    response = asyncio.run(dispatch(name, arguments, settings=get_settings()))
    click.echo(response.text)
    if response.is_error:
        sys.exit(1)


@main.command()
@click.argument("backend", type=click.Choice([b.value for b in Backend]))
@click.argument("task")
@click.option("--workdir", "-w", default=None, help="Working directory (defaults to current directory)")
@click.option("--role", "-r", default=None, help="Expert role prompt to apply if installed")
def ask(backend: str, task: str, workdir: str | None, role: str | None) -> None:
    """Send a task to one backend.

    \b
    Example:
        ccgagent ask codex "optimize this query" --role optimizer
    """
    arguments = {"task": task}
    if workdir:
        arguments["workdir"] = workdir
    if role:
        arguments["role"] = role
    _run_tool(f"ask_{backend}", arguments)


@main.command()
@click.argument("task")
@click.option("--workdir", "-w", default=None, help="Working directory (defaults to current directory)")
def compare(task: str, workdir: str | None) -> None:
    """Send a task to both backends in parallel."""
    arguments = {"task": task}
    if workdir:
        arguments["workdir"] = workdir
    _run_tool("ask_both", arguments)


@main.command()
@click.argument("task")
@click.option("--workdir", "-w", default=None, help="Working directory (defaults to current directory)")
def route(task: str, workdir: str | None) -> None:
    """Classify a task and send it to the best backend."""
    arguments = {"task": task}
    if workdir:
        arguments["workdir"] = workdir
    _run_tool("smart_route", arguments)


@main.command()
def doctor() -> None:
    """Check that the configured wrappers and prompts are installed."""
    from ccgagent.config import get_settings

    settings = get_settings()
    checks = [
        ("codeagent-wrapper", settings.wrapper_path),
        ("nanobanana-wrapper", settings.nanobanana_path),
        ("prompts directory", settings.prompts_dir),
    ]

    for label, path in checks:
        if path.exists():
            click.echo(f"✓ {label}: {path}")
        else:
            click.echo(f"✗ {label}: {path} (not found)")

    for backend in Backend:
        installed = [
            role
            for role in settings.roles_for(backend)
            if (settings.prompts_dir / backend.value / f"{role}.md").exists()
        ]
        click.echo(f"{backend.display_name} roles: {', '.join(installed) or 'none installed'}")

    click.echo(f"Timeout: {settings.timeout_seconds:g}s")
    if not settings.wrapper_path.exists():
        sys.exit(1)


if __name__ == "__main__":
    main()
