from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from connect4.logic.exceptions import InvariantViolationError
from connect4.messaging.types import (
    CreateGameMessage,
    JoinGameMessage,
    MakeMoveMessage,
    RegisterMessage,
    parse_client_message,
)

if TYPE_CHECKING:
    from connect4.messaging.protocol import ConnectionProtocol
    from connect4.session.manager import SessionManager

logger = logging.getLogger(__name__)


class MessageRouter:
    """
    Routes incoming messages to appropriate handlers.

    This class contains pure business logic and can be tested
    without real WebSocket connections.
    """

    def __init__(self, session_manager: SessionManager, *, strict_invariants: bool = False) -> None:
        self._session_manager = session_manager
        self._strict_invariants = strict_invariants

    async def handle_message(self, participant_id: str, raw_message: dict[str, Any]) -> None:
        try:
            message = parse_client_message(raw_message)
        except (ValidationError, KeyError, TypeError, ValueError) as e:
            # tolerate protocol skew: log and drop without replying
            logger.warning("ignoring malformed message from %s: %s", participant_id, e)
            return

        try:
            if isinstance(message, CreateGameMessage):
                await self._session_manager.create_game(participant_id)
            elif isinstance(message, JoinGameMessage):
                await self._session_manager.join_game(participant_id, message.game_id)
            elif isinstance(message, MakeMoveMessage):
                await self._session_manager.make_move(participant_id, message.game_id, message.column)
            elif isinstance(message, RegisterMessage):
                logger.debug("register from %s ignored, identity assigned on connect", participant_id)
        except InvariantViolationError:
            logger.exception("invariant violation while handling %s from %s", message.type, participant_id)
            if self._strict_invariants:
                raise
        except Exception:
            logger.exception("unexpected error while handling %s from %s", message.type, participant_id)

    async def handle_connect(self, connection: ConnectionProtocol) -> str:
        return await self._session_manager.handle_connect(connection)

    async def handle_disconnect(self, connection: ConnectionProtocol) -> None:
        await self._session_manager.handle_disconnect(connection)
