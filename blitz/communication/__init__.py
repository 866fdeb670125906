"""Communication: command parsing, formatting and the Telegram channel.

- Commands: prefix parsing, alias table, menu text
- Formatting: Telegram HTML helpers (re-exported from blitz.formatting)
- Telegram: channel adapter and the game presenter (imported directly)
"""

from .commands import COMMAND_ALIASES, ParsedCommand, build_menu_text, parse_command
from ..formatting import bold, code, escape, pre, strip_html

__all__ = [
    "COMMAND_ALIASES",
    "ParsedCommand",
    "build_menu_text",
    "parse_command",
    "bold",
    "code",
    "escape",
    "pre",
    "strip_html",
]
