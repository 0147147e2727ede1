"""In-memory store for live matches.

The store owns every state transition of a match (create, join, move,
leave, delete) and enforces the match invariants. It never talks to
connections: the SessionManager decides who hears about each transition.
"""

from __future__ import annotations

from connect4.logic.board import drop_result, empty_board, evaluate, place
from connect4.logic.enums import JoinRejection, LeaveOutcome
from connect4.logic.exceptions import GameNotFoundError, JoinRejectedError, NotYourTurnError
from connect4.session.identity import IdGenerator
from connect4.session.models import Match, MoveResult


class MatchStore:
    def __init__(self, id_generator: IdGenerator | None = None) -> None:
        self._ids = id_generator or IdGenerator()
        self._matches: dict[str, Match] = {}  # match_id -> Match

    def __len__(self) -> int:
        return len(self._matches)

    def create(self, founder_id: str) -> Match:
        match_id = self._ids.new_id(self._matches)
        match = Match(
            match_id=match_id,
            participants=[founder_id],
            board=empty_board(),
            current_player=founder_id,
        )
        self._matches[match_id] = match
        return match

    def get(self, match_id: str) -> Match | None:
        return self._matches.get(match_id)

    def _require(self, match_id: str) -> Match:
        match = self._matches.get(match_id)
        if match is None:
            raise GameNotFoundError
        return match

    def join(self, match_id: str, participant_id: str) -> Match:
        """Append participant_id to the match.

        Raises GameNotFoundError for an unknown match and JoinRejectedError
        when the match is full or the participant is already in it.
        current_player is not touched: the founder keeps the first move.
        """
        match = self._require(match_id)
        if match.has_participant(participant_id):
            raise JoinRejectedError(JoinRejection.ALREADY_JOINED)
        if match.is_full:
            raise JoinRejectedError(JoinRejection.FULL)
        match.participants.append(participant_id)
        if match.is_full:
            match.had_opponent = True
        return match

    def apply_move(self, match_id: str, participant_id: str, column: int) -> MoveResult:
        """Validate and apply a drop, returning the placement and verdict.

        Checks run in order (match exists, sender holds the turn, column has
        room) and each raises its own GameRuleError before anything changes.
        On a non-terminal verdict the turn passes to the next participant in
        join order. Terminal matches are left in the store; the caller
        deletes them once everyone has been told.
        """
        match = self._require(match_id)
        if match.current_player != participant_id:
            raise NotYourTurnError
        row = drop_result(match.board, column)

        match.board = place(match.board, row, column, participant_id)
        verdict = evaluate(match.board)
        if not verdict.is_terminal:
            match.current_player = match.next_player_after(participant_id)

        return MoveResult(
            match=match,
            participant_id=participant_id,
            row=row,
            column=column,
            verdict=verdict,
        )

    def leave(self, match_id: str, participant_id: str) -> LeaveOutcome:
        """Remove a participant, dissolving the match when nobody is left.

        Board state is kept. If the departing participant held the turn, it
        passes to whoever is next in join order so the remaining participant
        is not left waiting on someone who is gone.
        """
        match = self._matches.get(match_id)
        if match is None or not match.has_participant(participant_id):
            return LeaveOutcome.NOT_A_MEMBER

        successor = match.next_player_after(participant_id) if match.current_player == participant_id else None
        match.participants.remove(participant_id)

        if match.is_empty:
            del self._matches[match_id]
            return LeaveOutcome.MATCH_DISSOLVED

        if successor is not None:
            match.current_player = successor
        return LeaveOutcome.REMOVED

    def delete(self, match_id: str) -> None:
        self._matches.pop(match_id, None)

    def matches_for(self, participant_id: str) -> list[Match]:
        return [match for match in self._matches.values() if match.has_participant(participant_id)]
