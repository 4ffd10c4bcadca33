"""
Custom exceptions.

Expected, user-triggerable outcomes (an illegal move attempt, moving out of turn, ...) are NOT exceptions:
the Game returns a MoveResult for those. The errors below signal misuse of the API or a corrupted state.
"""


class GameError(Exception):
    """Top level exception for anything raised by this package."""


class GameStateError(GameError):
    """Operation not allowed in the current state of the game (ex. starting a game twice)."""


class CorruptPositionError(GameError):
    """A piece set that can never occur in a well-formed game (duplicate ids, two pieces on one square, ...)."""


class GameNotFoundError(GameError):
    """No game stored under the requested id."""


class InvalidRequestError(GameError, ValueError):
    """
    Input from the presentation layer could not be interpreted.

    NOTE: Also a ValueError, so pydantic validators can raise it and have it reported as a ValidationError.
    """
