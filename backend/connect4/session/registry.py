"""Connection registry: participant identifier <-> live channel."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from connect4.logic.exceptions import InvariantViolationError

if TYPE_CHECKING:
    from connect4.messaging.protocol import ConnectionProtocol

logger = structlog.get_logger()


class ConnectionRegistry:
    """Track which participant owns which connection.

    The registry is the only authority on whether a participant is reachable.
    Lookups for an unknown participant mean a stale reference survived
    cleanup; in strict mode that raises, otherwise it is logged and the
    caller drops the send.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self._strict = strict
        self._channels: dict[str, ConnectionProtocol] = {}  # participant_id -> connection
        self._participants: dict[str, str] = {}  # connection_id -> participant_id (reverse index)

    def __len__(self) -> int:
        return len(self._channels)

    def __contains__(self, participant_id: object) -> bool:
        return participant_id in self._channels

    def register(self, participant_id: str, channel: ConnectionProtocol) -> None:
        if participant_id in self._channels:
            raise InvariantViolationError(f"participant {participant_id} is already registered")
        self._channels[participant_id] = channel
        self._participants[channel.connection_id] = participant_id

    def resolve(self, participant_id: str) -> ConnectionProtocol | None:
        channel = self._channels.get(participant_id)
        if channel is None:
            if self._strict:
                raise InvariantViolationError(f"no channel registered for participant {participant_id}")
            logger.warning("send to unregistered participant dropped", participant_id=participant_id)
        return channel

    def unregister(self, participant_id: str) -> None:
        channel = self._channels.pop(participant_id, None)
        if channel is not None:
            self._participants.pop(channel.connection_id, None)

    def find_by_channel(self, channel: ConnectionProtocol) -> str | None:
        return self._participants.get(channel.connection_id)
