"""
Custom exceptions shared by all layers.

NOTE: GameError deliberately does not derive from ValueError. pydantic wraps ValueErrors raised in validators into a ValidationError,
while any other exception type propagates unchanged (the API layer maps these onto HTTP status codes).
"""


class GameError(Exception):
    """Top-level exception for anything the game refuses to do."""


class InvalidFENError(GameError):
    """String cannot be interpreted as a Xiangqi FEN."""


class InvalidMoveNotationError(GameError):
    """String cannot be interpreted as a UCCI move / square."""


class IllegalMoveError(GameError):
    """Move is well-formed, but not in the set of legal moves."""


class GameStateError(GameError):
    """Action not allowed in the current state of the game (ex. the game is over)."""


class NotYourTurnError(GameError):
    """The other side has to move first."""


class RepositoryError(GameError):
    """Problems retrieving/storing records."""


class InvalidRequestError(GameError):
    """Request data fails validation."""


class OracleError(GameError):
    """The AI move oracle could not be reached or returned something unusable."""


class StaleSuggestionError(GameError):
    """Oracle answered for a position that is no longer on the board."""
