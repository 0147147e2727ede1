import contextlib
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog
from starlette.websockets import WebSocket, WebSocketDisconnect

from connect4.messaging.encoder import DecodeError, decode
from connect4.messaging.protocol import ConnectionProtocol

if TYPE_CHECKING:
    from connect4.messaging.router import MessageRouter

logger = structlog.get_logger()

# Consecutive undecodable frames tolerated before the socket is closed
_MAX_DECODE_ERRORS = 5
_DECODE_ERRORS_CLOSE_CODE = 4004


class WebSocketConnection(ConnectionProtocol):
    """Starlette WebSocket exposed through ConnectionProtocol.

    A peer that has gone away surfaces as ConnectionError on both send and
    receive, so callers handle one exception type for a dead channel.
    """

    def __init__(self, websocket: WebSocket, connection_id: str | None = None) -> None:
        self._websocket = websocket
        self._connection_id = connection_id or str(uuid4())

    @property
    def connection_id(self) -> str:
        return self._connection_id

    async def send_text(self, data: str) -> None:
        try:
            await self._websocket.send_text(data)
        except WebSocketDisconnect as e:
            raise ConnectionError(f"peer gone (code {e.code})") from None

    async def receive_text(self) -> str:
        """Receive the next frame as text; binary frames are decoded as UTF-8."""
        frame = await self._websocket.receive()
        if frame["type"] == "websocket.disconnect":
            raise ConnectionError(f"peer closed (code {frame.get('code', 1000)})")
        if frame.get("text") is not None:
            return frame["text"]
        return (frame.get("bytes") or b"").decode("utf-8", errors="replace")

    async def close(self, code: int = 1000, reason: str = "") -> None:
        with contextlib.suppress(WebSocketDisconnect, RuntimeError):
            await self._websocket.close(code=code, reason=reason)


async def _next_request(connection: WebSocketConnection, strikes: int) -> tuple[dict[str, Any] | None, int]:
    """Read one frame and return (request, strikes).

    request is None when the frame could not be decoded; strikes counts
    consecutive failures and resets on a good frame.
    """
    raw = await connection.receive_text()
    try:
        return decode(raw), 0
    except DecodeError as e:
        logger.warning("undecodable frame dropped", error=str(e), strikes=strikes + 1)
        return None, strikes + 1


async def websocket_endpoint(websocket: WebSocket, router: "MessageRouter") -> None:
    await websocket.accept()
    connection = WebSocketConnection(websocket)
    participant_id = await router.handle_connect(connection)
    structlog.contextvars.bind_contextvars(participant_id=participant_id)
    logger.info("channel opened", connection_id=connection.connection_id)

    strikes = 0
    try:
        with contextlib.suppress(WebSocketDisconnect, RuntimeError, ConnectionError):
            while strikes < _MAX_DECODE_ERRORS:
                request, strikes = await _next_request(connection, strikes)
                if request is not None:
                    await router.handle_message(participant_id, request)
            logger.info("closing channel after repeated undecodable frames", strikes=strikes)
            await connection.close(code=_DECODE_ERRORS_CLOSE_CODE, reason="too_many_decode_errors")
    finally:
        await router.handle_disconnect(connection)
        logger.info("channel closed", connection_id=connection.connection_id)
        structlog.contextvars.clear_contextvars()
