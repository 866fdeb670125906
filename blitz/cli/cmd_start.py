"""Start command."""

import asyncio
import sys

import click

from . import cli
from .shared import console


@cli.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def start(debug):
    """Start the Telegram bot."""
    from blitz.config import load_settings
    from blitz.main import run, setup_logging

    settings = load_settings()
    setup_logging(debug or settings.debug, settings.log_file)

    console.print(f"[bold blue]Starting {settings.bot_name}...[/bold blue]")
    exit_code = asyncio.run(run(settings))
    if exit_code:
        console.print("[red]Blitz stopped with errors. Check the log for details.[/red]")
        sys.exit(exit_code)
