from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
import uvicorn
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route, WebSocketRoute

from connect4.messaging.router import MessageRouter
from connect4.server.settings import GameServerSettings
from connect4.server.websocket import websocket_endpoint
from connect4.session.identity import IdGenerator
from connect4.session.manager import SessionManager
from connect4.session.match_store import MatchStore
from connect4.session.registry import ConnectionRegistry
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.websockets import WebSocket


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def status(request: Request) -> JSONResponse:
    session_manager: SessionManager = request.app.state.session_manager
    settings: GameServerSettings = request.app.state.settings
    return JSONResponse(
        {
            "status": "ok",
            "participants": session_manager.participant_count,
            "matches": session_manager.match_count,
            "max_capacity": settings.max_capacity,
        },
    )


def build_session_manager(settings: GameServerSettings) -> SessionManager:
    """Wire the registry, store and id policy described by settings."""
    id_generator = IdGenerator(settings.id_format)
    return SessionManager(
        registry=ConnectionRegistry(strict=settings.strict_invariants),
        match_store=MatchStore(id_generator),
        id_generator=id_generator,
        max_capacity=settings.max_capacity,
    )


def create_app(
    settings: GameServerSettings | None = None,
    session_manager: SessionManager | None = None,
    message_router: MessageRouter | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = GameServerSettings()

    if session_manager is None:
        session_manager = build_session_manager(settings)

    if message_router is None:
        message_router = MessageRouter(session_manager, strict_invariants=settings.strict_invariants)

    async def ws_endpoint(websocket: WebSocket) -> None:
        await websocket_endpoint(websocket, message_router)

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/status", status, methods=["GET"]),
        WebSocketRoute("/ws", ws_endpoint),
    ]

    app = Starlette(routes=routes)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )
    app.state.settings = settings
    app.state.session_manager = session_manager

    logger.info("game server ready", id_format=settings.id_format, strict_invariants=settings.strict_invariants)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (e.g., uvicorn --factory)."""
    settings = GameServerSettings()
    setup_logging(log_dir=settings.log_dir, service="connect4")
    return create_app(settings=settings)


def main() -> None:  # pragma: no cover
    """Serve the game server on the configured host and port."""
    settings = GameServerSettings()
    uvicorn.run(
        "connect4.server.app:get_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
