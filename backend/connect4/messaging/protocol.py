"""The channel a participant is reached through.

SessionManager and MessageRouter only see ConnectionProtocol; the Starlette
adapter lives in connect4.server.websocket and tests use MockConnection.
Frames are JSON text both ways.
"""

from abc import ABC, abstractmethod
from typing import Any

from connect4.messaging.encoder import decode, encode


class ConnectionProtocol(ABC):
    """One participant's bidirectional channel.

    Implementations supply the raw text transport and a stable
    connection_id; the registry keys its reverse lookup on that id.
    A channel whose peer is gone raises from send_text, and callers
    treat that as a dropped message.
    """

    @property
    @abstractmethod
    def connection_id(self) -> str: ...

    @abstractmethod
    async def send_text(self, data: str) -> None: ...

    @abstractmethod
    async def receive_text(self) -> str: ...

    @abstractmethod
    async def close(self, code: int = 1000, reason: str = "") -> None: ...

    async def send_message(self, data: dict[str, Any]) -> None:
        await self.send_text(encode(data))

    async def receive_message(self) -> dict[str, Any]:
        """Read one frame and decode it; raises DecodeError for anything but a JSON object."""
        return decode(await self.receive_text())
