"""Main CLI application.

Click commands for metaso-mcp: serve, tools, call.
"""

from __future__ import annotations

import asyncio
import json as json_mod
import logging
import sys
from typing import TYPE_CHECKING, Any

import click
from rich.console import Console
from rich.table import Table

from metaso_mcp import __version__
from metaso_mcp.config.loader import load_config
from metaso_mcp.core.errors import ConfigError

if TYPE_CHECKING:
    from metaso_mcp.config.schema import Config
    from metaso_mcp.tools.base import ToolResponse

logger = logging.getLogger(__name__)

_CONFIG_HELP = (
    "Please ensure the METASO_API_KEY environment variable is set.\n"
    'Example: export METASO_API_KEY="mk-YOUR_API_KEY_HERE"'
)


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str, hint: str | None = None) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    if hint:
        click.echo(f"\n{hint}", err=True)
    sys.exit(1)


def configure_logging(debug: bool) -> None:
    """Send logs to stderr; stdout carries the MCP protocol."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )


def _load_config(debug: bool) -> Config:
    """Load config with user-friendly error handling."""
    overrides: dict[str, Any] = {"debug": True} if debug else {}
    try:
        return load_config(overrides=overrides)
    except ConfigError as e:
        _error(str(e), _CONFIG_HELP)
        raise  # unreachable, keeps mypy happy


async def _call_async(config: Config, name: str, arguments: dict[str, Any]) -> ToolResponse:
    from metaso_mcp.tools.dispatcher import ToolDispatcher

    dispatcher = ToolDispatcher(config)
    try:
        return await dispatcher.dispatch(name, arguments)
    finally:
        await dispatcher.aclose()


# ── CLI group ────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="metaso-mcp")
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Log HTTP traffic (API key masked). Same as METASO_DEBUG=true.",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """metaso-mcp - Metaso search, reader and chat as MCP tools."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ── serve ────────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Start the MCP server on stdio."""
    from metaso_mcp.mcp.server import run_server

    config = _load_config(ctx.obj["debug"])
    configure_logging(config.debug)
    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        logger.info("Shutting down Metaso MCP Server...")


# ── tools ────────────────────────────────────────────────────────


@cli.command()
@click.option("--json", "as_json", is_flag=True, default=False, help="Print raw JSON schemas.")
def tools(as_json: bool) -> None:
    """List the tools this server exposes."""
    from metaso_mcp.tools.chat import CHAT_TOOL
    from metaso_mcp.tools.reader import READER_TOOL
    from metaso_mcp.tools.search import SEARCH_TOOL

    definitions = [SEARCH_TOOL, READER_TOOL, CHAT_TOOL]
    if as_json:
        output = [
            {
                "name": d.name,
                "description": d.description,
                "inputSchema": d.input_schema,
            }
            for d in definitions
        ]
        click.echo(json_mod.dumps(output, indent=2))
        return

    table = Table(title="Metaso MCP tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Required")
    table.add_column("Description")
    for d in definitions:
        table.add_row(d.name, ", ".join(d.input_schema.get("required", [])), d.description)
    Console().print(table)


# ── call ─────────────────────────────────────────────────────────


@cli.command()
@click.argument("name")
@click.argument("arguments", required=False, default="{}")
@click.pass_context
def call(ctx: click.Context, name: str, arguments: str) -> None:
    """Invoke a tool once and print its response.

    ARGUMENTS is a JSON object, e.g. '{"query": "python asyncio"}'.
    """
    try:
        args = json_mod.loads(arguments)
    except json_mod.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="ARGUMENTS") from e
    if not isinstance(args, dict):
        raise click.BadParameter("must be a JSON object", param_hint="ARGUMENTS")

    config = _load_config(ctx.obj["debug"])
    configure_logging(config.debug)
    response = asyncio.run(_call_async(config, name, args))

    Console().print_json(response.to_json())
    if response.is_error:
        sys.exit(1)
