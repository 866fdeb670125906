"""Config and menu commands."""

import click
from rich.table import Table

from . import cli
from .shared import console, mask_secret


@cli.command()
def config():
    """Show effective settings (token masked)."""
    from blitz.config import load_settings

    settings = load_settings()

    table = Table(title="Blitz Settings", show_header=False, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Bot name", settings.bot_name)
    table.add_row("Telegram token", mask_secret(settings.telegram_bot_token))
    table.add_row("Command prefix", settings.command_prefix)
    table.add_row("Owner Opay info", settings.owner_opay_info)
    table.add_row("TikTok API", f"{settings.tiktok_api_url} (timeout {settings.tiktok_timeout:g}s)")
    table.add_row("Download dir", settings.scratch_dir)
    table.add_row("Max upload", f"{settings.max_upload_mb} MB")
    idle = f"{settings.ttt_idle_timeout:g}s" if settings.ttt_idle_timeout else "never"
    table.add_row("TTT idle expiry", idle)
    table.add_row("Debug", "yes" if settings.debug else "no")
    table.add_row("Log file", settings.log_file or "(stderr only)")

    console.print(table)


@cli.command()
def menu():
    """Print the chat command menu."""
    from blitz.config import load_settings
    from blitz.communication.commands import build_menu_text

    settings = load_settings()
    console.print(build_menu_text(settings.bot_name, settings.command_prefix), markup=False)
