from dataclasses import dataclass, field

from connect4.logic.board import Board, Verdict, empty_board
from connect4.logic.enums import MatchPhase, PlayerMark

MAX_PARTICIPANTS = 2


@dataclass
class Match:
    """A match held by the MatchStore.

    Lifecycle:
    - Created with a single founder, an empty board and the founder to move
    - join appends the second participant; the turn is left unchanged
    - apply_move replaces the board and advances current_player
    - leave removes a participant; the store drops the match once empty
    """

    match_id: str
    participants: list[str] = field(default_factory=list)
    board: Board = field(default_factory=empty_board)
    current_player: str | None = None
    had_opponent: bool = False  # set once a second participant has joined

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    @property
    def is_full(self) -> bool:
        return self.participant_count >= MAX_PARTICIPANTS

    @property
    def is_empty(self) -> bool:
        return self.participant_count == 0

    @property
    def phase(self) -> MatchPhase:
        if self.is_full:
            return MatchPhase.ACTIVE
        if self.had_opponent:
            return MatchPhase.ACTIVE_WITH_ONE
        return MatchPhase.FORMING

    def has_participant(self, participant_id: str) -> bool:
        return participant_id in self.participants

    def mark_for(self, participant_id: str) -> PlayerMark:
        """Display mark by join order: the first participant plays X."""
        return PlayerMark.X if self.participants.index(participant_id) == 0 else PlayerMark.O

    def next_player_after(self, participant_id: str) -> str:
        """Return the participant after participant_id in join order, wrapping around."""
        index = self.participants.index(participant_id)
        return self.participants[(index + 1) % self.participant_count]


@dataclass(frozen=True)
class MoveResult:
    """Outcome of an accepted move."""

    match: Match
    participant_id: str
    row: int
    column: int
    verdict: Verdict

    @property
    def is_terminal(self) -> bool:
        return self.verdict.is_terminal
