"""Tic Tac Toe engine: per-chat game table, locking and rendering.

The engine owns an explicit ``GameStore`` (one per engine, created at
startup, never persisted). Each command for a chat runs under that chat's
``asyncio.Lock``; python-telegram-bot is configured with concurrent update
handling, so two moves in the same chat would otherwise interleave at the
presenter await points.
"""

import asyncio
import logging
import time
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Callable, Optional

from . import tictactoe
from .errors import GameError
from .presenter import Presenter, PresenterError
from .tictactoe import GameState, GameStatus, Render, RenderKind, Transition

logger = logging.getLogger("blitz.games")


class GameStore:
    """In-memory game table keyed by chat ID.

    Games live until they end, are declined or quit. With ``idle_timeout``
    set (seconds), a game untouched for longer than that is dropped the
    next time its chat is looked up; 0 keeps games forever.
    """

    def __init__(self, idle_timeout: float = 0, clock: Callable[[], float] = time.monotonic):
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._games: dict[int, GameState] = {}

    def get(self, chat_id: int) -> Optional[GameState]:
        game = self._games.get(chat_id)
        if game is None:
            return None
        if self.idle_timeout and self._clock() - game.updated_at > self.idle_timeout:
            logger.info(f"Expiring idle {game.status.value} game in chat {chat_id}")
            del self._games[chat_id]
            return None
        return game

    def put(self, chat_id: int, game: GameState):
        game.updated_at = self._clock()
        self._games[chat_id] = game

    def remove(self, chat_id: int):
        self._games.pop(chat_id, None)

    def __contains__(self, chat_id: int) -> bool:
        return self.get(chat_id) is not None

    def __len__(self) -> int:
        # get() drops expired games, so only live ones are counted
        return sum(1 for chat_id in list(self._games) if self.get(chat_id) is not None)


class TicTacToeEngine:
    """Runs ``.ttt`` sub-commands against the game table."""

    def __init__(self, presenter: Presenter, store: Optional[GameStore] = None, prefix: str = "."):
        self.presenter = presenter
        self.store = store if store is not None else GameStore()
        self.prefix = prefix
        # chat id -> lock, kept only while a command for that chat is running or waiting
        self._locks: dict[int, asyncio.Lock] = {}
        self._lock_users: dict[int, int] = defaultdict(int)

    async def handle_command(self, chat_id: int, user_id: int, user_name: str, args: list[str]):
        """Dispatch one ``ttt`` command.

        Sub-commands are matched case-insensitively: ``start [@user]``,
        ``@user``, ``accept``, ``decline``, ``move N``, ``quit``/``end``.
        Anything else (or nothing) shows the current game.
        """
        sub = args[0].lower() if args else None

        async with self._chat_lock(chat_id):
            game = self.store.get(chat_id)
            try:
                if sub == "start" or (sub and sub.startswith("@")):
                    if sub.startswith("@"):
                        mention = args[0]
                    else:
                        mention = args[1] if len(args) > 1 and args[1].startswith("@") else None
                    transition = tictactoe.issue_challenge(game, user_id, user_name, mention, self.prefix)
                elif sub == "accept":
                    transition = tictactoe.accept(game, user_id, user_name, self.prefix)
                elif sub == "decline":
                    transition = tictactoe.decline(game, user_id, user_name)
                elif sub == "move":
                    cell = tictactoe.parse_cell(args[1] if len(args) > 1 else None)
                    transition = tictactoe.move(game, user_id, cell, self.prefix)
                elif sub in ("quit", "end"):
                    transition = tictactoe.quit_game(game, user_id, user_name)
                else:
                    transition = tictactoe.status(game, self.prefix)
            except GameError as e:
                logger.debug(f"ttt {sub or 'status'} rejected in chat {chat_id}: {type(e).__name__}")
                await self.presenter.send(chat_id, e.render(self.prefix))
                return

            await self._apply(chat_id, transition)

    @asynccontextmanager
    async def _chat_lock(self, chat_id: int):
        lock = self._locks.setdefault(chat_id, asyncio.Lock())
        self._lock_users[chat_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[chat_id] -= 1
            if not self._lock_users[chat_id]:
                del self._lock_users[chat_id]
                del self._locks[chat_id]

    async def _apply(self, chat_id: int, transition: Transition):
        game = transition.game
        if game is None:
            self.store.remove(chat_id)
        elif transition.touch:
            self.store.put(chat_id, game)

        try:
            for render in transition.renders:
                handle = await self._render(chat_id, render)
                if render.track and game is not None and handle is not None:
                    game.message_handle = handle
        finally:
            if game is not None and game.status is GameStatus.ENDED:
                logger.info(f"Game in chat {chat_id} finished")
                self.store.remove(chat_id)

    async def _render(self, chat_id: int, render: Render) -> Optional[int]:
        if render.kind is RenderKind.DELETE:
            if render.handle is not None:
                await self.presenter.delete_quietly(chat_id, render.handle)
            return None

        if render.kind is RenderKind.EDIT_OR_SEND and render.handle is not None:
            try:
                return await self.presenter.edit(chat_id, render.handle, render.text, render.rich)
            except PresenterError as e:
                logger.warning(f"TTT: Could not edit message, sending new one. {e}")

        return await self.presenter.send(chat_id, render.text, render.rich)

    # ── Read-only view ──

    def game_for(self, chat_id: int) -> Optional[GameState]:
        return self.store.get(chat_id)
