"""
Custom exceptions shared by all layers.

Every exception carries a `kind`: the short error name the dispatcher hands back to the caller verbatim.
"""


class GameError(Exception):
    """Top-level exception. Anything the caller did wrong ends up as a subclass of this one."""

    kind: str = "GameError"


class OutOfRangeError(GameError):
    """A coordinate outside of the board was supplied."""

    kind = "OutOfRange"


class NoMatchError(GameError):
    """No active match for the (host, opponent) pair."""

    kind = "NoMatch"


class NotYourTurnError(GameError):
    kind = "NotYourTurn"


class IllegalMoveError(GameError):
    """Move breaks the rules of chess (includes a missing promotion)."""

    kind = "IllegalMove"


class MatchAlreadyFinishedError(GameError):
    kind = "MatchAlreadyFinished"


class MatchAlreadyExistsError(GameError):
    """The host already has an active match against this opponent."""

    kind = "MatchAlreadyExists"


class UnauthorizedError(GameError):
    """Identity is not allowed to perform the operation (non-admin, or not a participant of the match)."""

    kind = "Unauthorized"


class InvalidRequestError(GameError):
    kind = "InvalidRequest"


class RepositoryError(GameError):
    """Stored record could not be turned back into a match."""

    kind = "RepositoryError"
