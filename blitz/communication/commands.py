"""Prefix command parsing and the command menu."""

import re
from dataclasses import dataclass, field
from typing import Optional

_WHITESPACE = re.compile(r"\s+")

# alias -> canonical command name
COMMAND_ALIASES = {
    "start": "start",
    "alive": "start",
    "ping": "ping",
    "menu": "menu",
    "aza": "donate",
    "acc": "donate",
    "donate": "donate",
    "ytmp3": "ytmp3",
    "ytmp4": "ytmp4",
    "play": "play",
    "tiktok": "tiktok",
    "upscale": "upscale",
    "ttt": "ttt",
}


@dataclass
class ParsedCommand:
    name: str
    args: list[str] = field(default_factory=list)

    @property
    def canonical(self) -> Optional[str]:
        """Canonical command for ``name``, None if unknown."""
        return COMMAND_ALIASES.get(self.name)

    @property
    def rest(self) -> str:
        return " ".join(self.args)


def parse_command(text: Optional[str], prefix: str = ".") -> Optional[ParsedCommand]:
    """Split ``.cmd arg1 arg2`` into a command and arguments.

    Returns None for messages that are not commands. The command name is
    lowercased; arguments keep their case.
    """
    if not text or not text.startswith(prefix):
        return None
    body = text[len(prefix):].strip()
    if not body:
        return None
    name, *args = _WHITESPACE.split(body)
    # /ttt@SomeBot in groups
    name = name.split("@", 1)[0]
    if not name:
        return None
    return ParsedCommand(name=name.lower(), args=args)


def build_menu_text(bot_name: str, prefix: str = ".") -> str:
    p = prefix
    return "\n".join([
        f"{bot_name} - Command Menu ⚡",
        "-----------------------------------",
        f"▫️ {p}start, {p}alive - Check if bot is online",
        f"▫️ {p}ping - Check bot latency & react",
        f"▫️ {p}menu - Show this command menu",
        f"▫️ {p}aza, {p}acc, {p}donate - Show Opay account info",
        f"▫️ {p}ytmp3 [youtube_link] - Download YouTube audio",
        f"▫️ {p}ytmp4 [youtube_link] - Download YouTube video",
        f"▫️ {p}play [song_name] - Play music from YouTube",
        f"▫️ {p}tiktok [tiktok_link] - Download TikTok video (Experimental)",
        f"▫️ {p}upscale (reply to image) - Enhance replied image (Basic)",
        f"▫️ {p}ttt - Play Tic Tac Toe (e.g., {p}ttt @username or {p}ttt move 1)",
        "-----------------------------------",
    ])
