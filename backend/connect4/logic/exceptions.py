"""Typed domain exceptions for match rule violations.

Every rule violation a client can trigger subclasses GameRuleError and
carries the human-readable message sent back to the requester. The
session coordinator catches GameRuleError at its boundary and converts it
into an error reply; nothing in this hierarchy is broadcast.
"""

from connect4.logic.enums import JoinRejection


class GameRuleError(Exception):
    """Base exception for requests that violate match rules.

    Attributes:
        message: Client-facing reason, sent verbatim in the error reply.

    """

    message = "Request rejected"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class GameNotFoundError(GameRuleError):
    """Referenced match identifier does not exist."""

    message = "Game not found"


class NotYourTurnError(GameRuleError):
    """Move submitted by a participant who is not the current mover."""

    message = "It's not your turn"


class ColumnFullError(GameRuleError):
    """Requested column has no empty cell."""

    message = "Column is full"


class JoinRejectedError(GameRuleError):
    """Match already has two participants, or the participant already joined."""

    message = "Game is full or you are already in the game"

    def __init__(self, reason: JoinRejection) -> None:
        self.reason = reason
        super().__init__()


class CapacityExceededError(GameRuleError):
    """The server already holds the maximum number of live matches."""

    message = "Server at capacity"


class InvariantViolationError(Exception):
    """Raised when internal bookkeeping is inconsistent.

    Examples are a send addressed to a participant the connection registry
    no longer knows, or a generated identifier colliding with a live one.
    These indicate a bug in the coordinator, not a client mistake.
    """
