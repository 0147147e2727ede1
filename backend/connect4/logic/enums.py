"""
String enum definitions for match lifecycle concepts.
"""

from enum import StrEnum


class MatchPhase(StrEnum):
    """Lifecycle phase of a live match, derived from its participants."""

    FORMING = "forming"
    ACTIVE = "active"
    ACTIVE_WITH_ONE = "active_with_one"


class JoinRejection(StrEnum):
    """Reasons a join request is refused."""

    FULL = "full"
    ALREADY_JOINED = "already_joined"


class LeaveOutcome(StrEnum):
    """Result of removing a participant from a match."""

    REMOVED = "removed"
    MATCH_DISSOLVED = "match_dissolved"
    NOT_A_MEMBER = "not_a_member"


class PlayerMark(StrEnum):
    """Display symbol assigned to each participant by join order."""

    X = "X"
    O = "O"  # noqa: E741
