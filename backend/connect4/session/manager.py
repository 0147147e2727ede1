from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import structlog

from connect4.logic.enums import LeaveOutcome
from connect4.logic.exceptions import CapacityExceededError, GameNotFoundError, GameRuleError
from connect4.messaging.types import (
    CurrentPlayerMessage,
    ErrorMessage,
    GameCreatedMessage,
    GameJoinedMessage,
    GameOverMessage,
    GameUpdateMessage,
    MatchSnapshot,
    PlayerDisconnectedMessage,
    UserIdMessage,
)
from connect4.session.broadcast import broadcast_to_participants, send_to_participant
from connect4.session.identity import IdGenerator
from connect4.session.match_store import MatchStore
from connect4.session.registry import ConnectionRegistry

if TYPE_CHECKING:
    from connect4.messaging.protocol import ConnectionProtocol
    from connect4.session.models import Match, MoveResult

logger = structlog.get_logger()


class SessionManager:
    """Coordinate participants, matches and the notifications between them.

    Registry and store updates are synchronous, so they never interleave on
    the event loop. Sends are awaited, and a match's transition plus its
    notifications run under that match's lock: two moves in one match are
    applied and announced in order, while a peer that stops reading only
    stalls the match it belongs to.
    """

    def __init__(
        self,
        registry: ConnectionRegistry | None = None,
        match_store: MatchStore | None = None,
        id_generator: IdGenerator | None = None,
        *,
        max_capacity: int | None = None,
    ) -> None:
        self._ids = id_generator or IdGenerator()
        self._registry = registry or ConnectionRegistry()
        self._matches = match_store or MatchStore(self._ids)
        self._max_capacity = max_capacity
        self._match_locks: dict[str, asyncio.Lock] = {}  # match_id -> Lock

    @property
    def participant_count(self) -> int:
        return len(self._registry)

    @property
    def match_count(self) -> int:
        return len(self._matches)

    def get_match(self, match_id: str) -> Match | None:
        return self._matches.get(match_id)

    def _get_match_lock(self, match_id: str) -> asyncio.Lock | None:
        """Get the per-match lock, or None once the match has been removed."""
        return self._match_locks.get(match_id)

    def _forget_match(self, match_id: str) -> None:
        self._matches.delete(match_id)
        self._match_locks.pop(match_id, None)

    async def _send(self, participant_id: str, message: dict[str, Any]) -> None:
        await send_to_participant(self._registry, participant_id, message)

    async def _broadcast(self, match: Match, message: dict[str, Any]) -> None:
        await broadcast_to_participants(self._registry, match.participants, message)

    async def _send_error(self, participant_id: str, error: GameRuleError) -> None:
        logger.info("request rejected", participant_id=participant_id, reason=error.message)
        await self._send(participant_id, ErrorMessage(message=error.message).to_wire())

    async def handle_connect(self, connection: ConnectionProtocol) -> str:
        """Assign an identifier to a new connection, register it and tell the client."""
        participant_id = self._ids.new_id(self._registry)
        self._registry.register(participant_id, connection)
        logger.info("participant connected", participant_id=participant_id)
        await self._send(participant_id, UserIdMessage(id=participant_id).to_wire())
        return participant_id

    async def handle_disconnect(self, connection: ConnectionProtocol) -> None:
        """Forget a closed connection and remove its participant from every match."""
        participant_id = self._registry.find_by_channel(connection)
        if participant_id is None:
            return
        self._registry.unregister(participant_id)
        logger.info("participant disconnected", participant_id=participant_id)

        for match in self._matches.matches_for(participant_id):
            lock = self._get_match_lock(match.match_id)
            if lock is None:
                continue
            async with lock:
                outcome = self._matches.leave(match.match_id, participant_id)
                if outcome is LeaveOutcome.REMOVED:
                    await self._broadcast(match, PlayerDisconnectedMessage.for_participant(participant_id).to_wire())
                elif outcome is LeaveOutcome.MATCH_DISSOLVED:
                    self._match_locks.pop(match.match_id, None)
                    logger.info("match dissolved", match_id=match.match_id)

    async def create_game(self, participant_id: str) -> Match | None:
        if self._max_capacity is not None and len(self._matches) >= self._max_capacity:
            await self._send_error(participant_id, CapacityExceededError())
            return None

        match = self._matches.create(participant_id)
        lock = self._match_locks[match.match_id] = asyncio.Lock()
        logger.info("match created", match_id=match.match_id, participant_id=participant_id)
        async with lock:
            await self._send(participant_id, GameCreatedMessage(game=MatchSnapshot.from_match(match)).to_wire())
        return match

    async def join_game(self, participant_id: str, match_id: str) -> Match | None:
        """Add a participant to a match and tell everyone in it.

        Each participant gets the joined snapshot with their own mark, then
        a turn notice saying whether they move next.
        """
        lock = self._get_match_lock(match_id)
        if lock is None:
            await self._send_error(participant_id, GameNotFoundError())
            return None

        async with lock:
            try:
                match = self._matches.join(match_id, participant_id)
            except GameRuleError as e:
                await self._send_error(participant_id, e)
                return None

            logger.info("match joined", match_id=match_id, participant_id=participant_id, phase=match.phase)
            snapshot = MatchSnapshot.from_match(match)
            for member in list(match.participants):
                await self._send(member, GameJoinedMessage(game=snapshot, playing=match.mark_for(member)).to_wire())
            for member in list(match.participants):
                await self._send(member, CurrentPlayerMessage(is_your_turn=member == match.current_player).to_wire())
            return match

    async def make_move(self, participant_id: str, match_id: str, column: int) -> MoveResult | None:
        """Apply a drop and fan out its effects.

        The board update always goes to every participant before the
        game-over or turn notice for the same move. A finished match is
        removed once everyone has been told.
        """
        lock = self._get_match_lock(match_id)
        if lock is None:
            await self._send_error(participant_id, GameNotFoundError())
            return None

        async with lock:
            try:
                result = self._matches.apply_move(match_id, participant_id, column)
            except GameRuleError as e:
                await self._send_error(participant_id, e)
                return None

            match = result.match
            logger.info(
                "move applied",
                match_id=match_id,
                participant_id=participant_id,
                row=result.row,
                column=result.column,
            )
            await self._broadcast(match, GameUpdateMessage(game=MatchSnapshot.from_match(match)).to_wire())

            if result.is_terminal:
                verdict = result.verdict
                await self._broadcast(match, GameOverMessage(winner=verdict.winner, draw=verdict.draw).to_wire())
                self._forget_match(match_id)
                logger.info("match finished", match_id=match_id, winner=verdict.winner, draw=verdict.draw)
            elif match.current_player is not None:
                await self._send(match.current_player, CurrentPlayerMessage(is_your_turn=True).to_wire())
            return result
