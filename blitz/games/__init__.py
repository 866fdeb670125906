"""Chat games: currently two-player Tic Tac Toe."""

from .engine import GameStore, TicTacToeEngine
from .errors import GameError
from .presenter import Presenter, PresenterError
from .tictactoe import DRAW, GameState, GameStatus, Mark, PlayerSlot, check_result, render_board

__all__ = [
    "GameStore",
    "TicTacToeEngine",
    "GameError",
    "Presenter",
    "PresenterError",
    "DRAW",
    "GameState",
    "GameStatus",
    "Mark",
    "PlayerSlot",
    "check_result",
    "render_board",
]
