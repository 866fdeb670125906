"""Tic Tac Toe game model and state transitions.

The model is pure: nothing in this module touches the transport or the
per-chat game table. Each player action is a transition function that
validates its preconditions against the current ``GameState`` and either
raises a ``GameError`` (leaving the state untouched) or returns a
``Transition`` holding the next state plus the render instructions the
engine must carry out.

Lifecycle: absent -> pending -> active -> ended (ended games are removed
from the table as soon as their final board is rendered).
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..formatting import bold, code, escape, pre
from .errors import (
    ChallengerCannotAccept,
    GameAlreadyInProgress,
    GameNotActive,
    InvalidMove,
    InvalidOpponent,
    NoActiveGame,
    NoPendingChallenge,
    NotAParticipant,
    NotPartOfChallenge,
    NotTheChallengedPlayer,
    NotYourTurn,
)

DRAW = "draw"

# rows, columns, diagonals
WIN_LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)


class Mark(str, Enum):
    X = "X"
    O = "O"

    @property
    def other(self) -> "Mark":
        return Mark.O if self is Mark.X else Mark.X


class GameStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    ENDED = "ended"


@dataclass
class PlayerSlot:
    """Binding of a mark to a player.

    ``identity`` stays ``None`` for the challenged player until they accept;
    until then the slot is matched by display name only.
    """

    name: str
    identity: Optional[int] = None

    def matches_name(self, name: str) -> bool:
        return bool(name) and self.name.lower() == name.lower()


def _empty_board() -> list[Optional[Mark]]:
    return [None] * 9


@dataclass
class GameState:
    players: dict[Mark, PlayerSlot]
    board: list[Optional[Mark]] = field(default_factory=_empty_board)
    current_mark: Mark = Mark.X
    status: GameStatus = GameStatus.PENDING
    message_handle: Optional[int] = None
    updated_at: float = 0.0

    @property
    def current_player(self) -> PlayerSlot:
        return self.players[self.current_mark]

    def mark_of(self, identity: int) -> Optional[Mark]:
        """Mark bound to ``identity``, or None if they are not playing."""
        for mark, slot in self.players.items():
            if slot.identity is not None and slot.identity == identity:
                return mark
        return None


class RenderKind(str, Enum):
    SEND = "send"
    EDIT_OR_SEND = "edit_or_send"
    DELETE = "delete"


@dataclass
class Render:
    """One instruction for the presenter.

    ``track`` marks the render whose resulting message handle becomes the
    game's ``message_handle``.
    """

    kind: RenderKind
    text: str = ""
    rich: bool = False
    handle: Optional[int] = None
    track: bool = False


@dataclass
class Transition:
    """Result of a successful action: the state to keep and what to show.

    ``game`` is None when the action removes the game outright (decline,
    quit). A game whose status is ENDED is removed after rendering.
    ``touch`` is False for read-only views, which must not count as
    activity for idle expiry.
    """

    game: Optional[GameState]
    renders: list[Render] = field(default_factory=list)
    touch: bool = True

    @property
    def ended(self) -> bool:
        return self.game is None or self.game.status is GameStatus.ENDED


# ── Pure helpers ─────────────────────────────────────────────


def check_result(board: list[Optional[Mark]]) -> Optional[str]:
    """Return the winning mark, ``DRAW`` for a full board, or None.

    A completed line wins even when the same move also fills the board.
    """
    for a, b, c in WIN_LINES:
        if board[a] is not None and board[a] == board[b] == board[c]:
            return Mark(board[a])
    if all(cell is not None for cell in board):
        return DRAW
    return None


def render_board(board: list[Optional[Mark]], players: Optional[dict[Mark, PlayerSlot]] = None) -> str:
    """Render the board as a plain-text 3x3 grid.

    Empty cells show their 1-based position so players know which number
    to send with ``move``.
    """
    lines = ["Tic Tac Toe:"]
    for row in range(3):
        cells = []
        for col in range(3):
            index = row * 3 + col
            cells.append(board[index].value if board[index] is not None else str(index + 1))
        lines.append(" " + " | ".join(cells) + " ")
        if row < 2:
            lines.append("---|---|---")
    if players:
        x_slot = players[Mark.X]
        o_slot = players[Mark.O]
        o_name = o_slot.name if o_slot.identity is not None else f"{o_slot.name} (waiting)"
        lines.append("")
        lines.append(f"X: {x_slot.name}")
        lines.append(f"O: {o_name}")
    return "\n".join(lines)


def parse_cell(value: Optional[str]) -> Optional[int]:
    """Parse a 1-based cell number; None when it is not a number in 1..9."""
    if value is None:
        return None
    try:
        cell = int(value.strip())
    except ValueError:
        return None
    if not 1 <= cell <= 9:
        return None
    return cell


def _board_html(game: GameState) -> str:
    return pre(render_board(game.board, game.players))


def _turn_html(game: GameState, prefix: str) -> str:
    player = game.current_player
    return (
        f"It's {bold(player.name)}'s ({game.current_mark.value}) turn.\n"
        f"Use {code(f'{prefix}ttt move [1-9]')}"
    )


# ── Transitions ──────────────────────────────────────────────


def issue_challenge(
    existing: Optional[GameState],
    challenger_id: int,
    challenger_name: str,
    opponent_mention: Optional[str],
    prefix: str = ".",
) -> Transition:
    if existing is not None and existing.status is not GameStatus.ENDED:
        raise GameAlreadyInProgress()

    opponent = (opponent_mention or "").strip().lstrip("@")
    if not opponent:
        raise InvalidOpponent()
    if opponent.lower() == (challenger_name or "").lower():
        raise InvalidOpponent("You can't play Tic Tac Toe against yourself!")

    game = GameState(
        players={
            Mark.X: PlayerSlot(name=challenger_name, identity=challenger_id),
            Mark.O: PlayerSlot(name=opponent),
        },
    )
    invitation = (
        f"@{escape(opponent)}, {bold(challenger_name)} challenges you to Tic Tac Toe!\n"
        f"Type {code(f'{prefix}ttt accept')} to play. Or {code(f'{prefix}ttt decline')}."
    )
    return Transition(game, [Render(RenderKind.SEND, invitation, rich=True, track=True)])


def accept(game: Optional[GameState], accepter_id: int, accepter_name: str, prefix: str = ".") -> Transition:
    if game is None or game.status is not GameStatus.PENDING:
        raise NoPendingChallenge()
    if game.players[Mark.X].identity == accepter_id:
        raise ChallengerCannotAccept()
    if not game.players[Mark.O].matches_name(accepter_name):
        raise NotTheChallengedPlayer()

    nxt = copy.deepcopy(game)
    nxt.players[Mark.O].identity = accepter_id
    nxt.status = GameStatus.ACTIVE

    text = f"{_board_html(nxt)}\nGame started! {_turn_html(nxt, prefix)}"
    renders = [Render(RenderKind.SEND, text, rich=True, track=True)]
    if game.message_handle is not None:
        renders.append(Render(RenderKind.DELETE, handle=game.message_handle))
    return Transition(nxt, renders)


def decline(game: Optional[GameState], actor_id: int, actor_name: str) -> Transition:
    if game is None or game.status is not GameStatus.PENDING:
        raise NoPendingChallenge("No pending game to decline.")
    is_challenged = game.players[Mark.O].matches_name(actor_name)
    is_challenger = game.players[Mark.X].identity == actor_id
    if not (is_challenged or is_challenger):
        raise NotPartOfChallenge()

    renders = [Render(RenderKind.SEND, f"{actor_name} declined/cancelled the Tic Tac Toe challenge.")]
    if game.message_handle is not None:
        renders.append(Render(RenderKind.DELETE, handle=game.message_handle))
    return Transition(None, renders)


def move(game: Optional[GameState], actor_id: int, cell: Optional[int], prefix: str = ".") -> Transition:
    """Place the acting player's mark on ``cell`` (1-based)."""
    if game is None or game.status is not GameStatus.ACTIVE:
        raise GameNotActive()
    if game.current_player.identity != actor_id:
        raise NotYourTurn()
    if cell is None or not 1 <= cell <= 9 or game.board[cell - 1] is not None:
        raise InvalidMove()

    nxt = copy.deepcopy(game)
    nxt.board[cell - 1] = nxt.current_mark
    result = check_result(nxt.board)

    text = _board_html(nxt) + "\n"
    if result == DRAW:
        nxt.status = GameStatus.ENDED
        text += "It's a draw! 🤝"
    elif result is not None:
        nxt.status = GameStatus.ENDED
        text += f"Player {bold(nxt.players[result].name)} ({result.value}) wins! 🎉"
    else:
        nxt.current_mark = nxt.current_mark.other
        text += _turn_html(nxt, prefix)

    render = Render(RenderKind.EDIT_OR_SEND, text, rich=True, handle=nxt.message_handle, track=True)
    return Transition(nxt, [render])


def quit_game(game: Optional[GameState], actor_id: int, actor_name: str) -> Transition:
    if game is None or game.status is GameStatus.ENDED:
        raise NoActiveGame()
    if game.mark_of(actor_id) is None:
        raise NotAParticipant()

    renders = [Render(RenderKind.SEND, f"{actor_name} has ended the Tic Tac Toe game.")]
    if game.message_handle is not None:
        renders.append(Render(RenderKind.DELETE, handle=game.message_handle))
    return Transition(None, renders)


def status(game: Optional[GameState], prefix: str = ".") -> Transition:
    if game is None or game.status is GameStatus.ENDED:
        raise NoActiveGame()
    if game.status is GameStatus.PENDING:
        opponent = game.players[Mark.O].name
        text = f"Game pending. Waiting for @{escape(opponent)} to type {code(f'{prefix}ttt accept')}."
        return Transition(game, [Render(RenderKind.SEND, text, rich=True)], touch=False)

    text = f"{_board_html(game)}\n{_turn_html(game, prefix)}"
    render = Render(RenderKind.EDIT_OR_SEND, text, rich=True, handle=game.message_handle, track=True)
    return Transition(game, [render], touch=False)
