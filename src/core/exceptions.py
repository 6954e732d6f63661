"""Custom exceptions. Everything raised on purpose by this package derives from GameError."""


class GameError(Exception):
    """Top-level exception for the puzzle engine."""


class InvalidGuessError(GameError):
    """A submitted guess was rejected. The message is meant to be shown to the player as is."""


class GameStateError(GameError):
    """Operation does not make sense for the current state of the board / session."""


class SessionNotReadyError(GameStateError):
    """Word pools have not been supplied yet."""


class RepositoryError(GameError):
    """Something went wrong talking to durable storage."""


class ExportError(GameError):
    """An exporter (clipboard or alike) could not deliver the result text."""


class InvalidRequestError(GameError):
    """Raised from the request model validators (pydantic lets it propagate as is, it is not a ValueError)."""
