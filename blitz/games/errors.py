"""Game precondition errors.

Every error here is a user-input or state-precondition violation, never a
defect. The message of each exception is the text shown to the user, and
raising one guarantees that no game state was changed.
"""


class GameError(Exception):
    """Base class for Tic Tac Toe rule violations."""

    default_message = "That can't be done right now."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    def render(self, prefix: str = ".") -> str:
        """User-facing text with the command prefix filled in."""
        return str(self).replace("{prefix}", prefix)


class GameAlreadyInProgress(GameError):
    default_message = "A game is already in progress or pending in this chat!"


class InvalidOpponent(GameError):
    default_message = "To start a game, mention an opponent: {prefix}ttt @username"


class NoPendingChallenge(GameError):
    default_message = "No pending game to accept or game already started."


class NotTheChallengedPlayer(GameError):
    default_message = "This challenge is not for you."


class ChallengerCannotAccept(GameError):
    default_message = "You started this challenge, waiting for the opponent to accept."


class NotPartOfChallenge(GameError):
    default_message = "You are not part of this pending challenge."


class GameNotActive(GameError):
    default_message = "No active game. Start one with {prefix}ttt @username or accept a pending challenge."


class NotYourTurn(GameError):
    default_message = "It's not your turn!"


class InvalidMove(GameError):
    default_message = "Invalid move. Choose an empty cell number from 1 to 9."


class NoActiveGame(GameError):
    default_message = "No active game. Start one with {prefix}ttt @username or accept a pending challenge."


class NotAParticipant(GameError):
    default_message = "Only players in the current game can end it."
