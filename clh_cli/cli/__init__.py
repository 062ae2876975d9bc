"""
Command-Line Interface

CLI commands for clh, the CloudletHub client. CloudletHub is a Continuous
Delivery as a Service; full documentation is available at
https://cloudlethub.com/docs

Commands:
    clh version                 - Print the version number of clh
    clh use-context [NAME]      - Switch to another context and save it as default
    clh config                  - Save endpoint and credentials for a context

Global options (accepted before or after the command):
    --log_level, -l   Level for logs
    --config          Path to a config file
    --context, -c     clh context name

Usage:
    # Store credentials for the "staging" context
    clh config -c staging -e https://hub.example.com/ -u bob -k s3cr3t

    # Make "staging" the default context
    clh use-context staging
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NoReturn, Optional

import typer
from dotenv import find_dotenv, load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from clh_cli.config.defaults import VERSION_STRING
from clh_cli.config.errors import ConfigError
from clh_cli.config.resolver import (
    ConfigResolution,
    persist,
    resolve_phase_one,
    resolve_phase_two,
    switch_context,
)
from clh_cli.types import CLIFlags
from clh_cli.utils.log import configure_logging

__all__ = ["main", "app"]

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="clh",
    help="clh is a CloudletHub CLI tool",
    add_completion=False,
)
console = Console()


# Shared between the root callback and every command, so global options can
# be given on either side of the command name.
LOG_LEVEL_OPTION = typer.Option(None, "--log_level", "-l", help="Level for logs")
CONFIG_OPTION = typer.Option(None, "--config", help="Path to a config file")
CONTEXT_OPTION = typer.Option(None, "--context", "-c", help="CLH context name")


@dataclass
class CLIState:
    """State handed from the root callback to commands through `ctx.obj`."""

    resolution: ConfigResolution
    flags: CLIFlags


def _fail(error: Exception) -> NoReturn:
    logger.error(str(error))
    raise typer.Exit(code=1)


def _settle(ctx: typer.Context, flags: CLIFlags) -> ConfigResolution:
    """Run the second resolution phase with all flags of this invocation."""
    state: CLIState = ctx.obj
    try:
        return resolve_phase_two(state.resolution, state.flags.merged_with(flags))
    except ConfigError as e:
        _fail(e)


@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
    config: Optional[str] = CONFIG_OPTION,
    context: Optional[str] = CONTEXT_OPTION,
) -> None:
    """
    CloudletHub is a Continuous Delivery as a Service,
    the only CD you ever need.
    """
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=1)

    try:
        resolution = resolve_phase_one()
    except ConfigError as e:
        _fail(e)

    ctx.obj = CLIState(
        resolution=resolution,
        flags=CLIFlags(log_level=log_level, config=config, context=context),
    )


@app.command()
def version(
    ctx: typer.Context,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
    config: Optional[str] = CONFIG_OPTION,
    context: Optional[str] = CONTEXT_OPTION,
) -> None:
    """Print the version number of clh."""
    _settle(ctx, CLIFlags(log_level=log_level, config=config, context=context))
    typer.echo(VERSION_STRING)


@app.command("use-context")
def use_context(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(
        None,
        help="Context to use as default",
    ),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
    config: Optional[str] = CONFIG_OPTION,
    context: Optional[str] = CONTEXT_OPTION,
) -> None:
    """Switch to another context and save it as default."""
    resolution = _settle(ctx, CLIFlags(log_level=log_level, config=config, context=context))

    try:
        path = switch_context(resolution, name)
    except ConfigError as e:
        _fail(e)

    console.print(
        f"Using context [bold]{escape(resolution.context)}[/] "
        f"[dim]({escape(str(path))})[/]"
    )


@app.command("config")
def configure(
    ctx: typer.Context,
    endpoint: Optional[str] = typer.Option(
        None,
        "--endpoint", "-e",
        help="CLH address",
    ),
    username: Optional[str] = typer.Option(
        None,
        "--username", "-u",
        help="CLH username",
    ),
    secret_key: Optional[str] = typer.Option(
        None,
        "--secret_key", "-k",
        help="CLH Secret Key ID",
    ),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
    config: Optional[str] = CONFIG_OPTION,
    context: Optional[str] = CONTEXT_OPTION,
) -> None:
    """Configure clh, such as the Hub address and credentials."""
    resolution = _settle(
        ctx,
        CLIFlags(
            log_level=log_level,
            config=config,
            context=context,
            endpoint=endpoint,
            username=username,
            secret_key=secret_key,
        ),
    )

    try:
        path = persist(resolution)
    except ConfigError as e:
        _fail(e)

    profile = resolution.profile()
    console.print(Panel(
        f"  Endpoint: {escape(profile.endpoint)}\n"
        f"  Username: {escape(profile.username or '-')}\n"
        f"  Secret key: {escape(profile.masked_secret_key or '-')}\n\n"
        f"[dim]Saved to {escape(str(path))}[/]",
        title=f"Context: {escape(profile.name)}",
    ))


def main() -> None:
    """Entry point for the CLI."""
    load_dotenv(find_dotenv(usecwd=True))
    configure_logging()
    app()
