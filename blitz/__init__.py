"""Blitz: Telegram command bot (media helpers + Tic Tac Toe)."""

__version__ = "1.0.0"
