"""Shared send helpers for delivering messages to match participants."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterable

    from connect4.session.registry import ConnectionRegistry

logger = structlog.get_logger()


async def send_to_participant(
    registry: ConnectionRegistry,
    participant_id: str,
    message: dict[str, Any],
) -> bool:
    """Send a message to one participant. Return True if it was handed to the channel.

    Unknown participants and broken connections drop the message; the
    closed connection's own disconnect handling does the cleanup.
    """
    channel = registry.resolve(participant_id)
    if channel is None:
        return False
    try:
        await channel.send_message(message)
    except (RuntimeError, OSError, ConnectionError) as e:
        logger.warning("send failed", participant_id=participant_id, error=str(e))
        return False
    return True


async def broadcast_to_participants(
    registry: ConnectionRegistry,
    participant_ids: Iterable[str],
    message: dict[str, Any],
    exclude: str | None = None,
) -> None:
    """Send a message to every listed participant, skipping one if excluded.

    Snapshot the ids via list() so a leave that mutates the match list while
    we yield on a send cannot change who receives this message.
    """
    for participant_id in list(participant_ids):
        if participant_id != exclude:
            await send_to_participant(registry, participant_id, message)
