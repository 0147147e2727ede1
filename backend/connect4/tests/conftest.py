import pytest

from connect4.messaging.router import MessageRouter
from connect4.server.app import create_app
from connect4.server.settings import GameServerSettings
from connect4.session.manager import SessionManager
from connect4.session.registry import ConnectionRegistry


@pytest.fixture
def registry():
    return ConnectionRegistry(strict=True)


@pytest.fixture
def session_manager(registry):
    return SessionManager(registry=registry)


@pytest.fixture
def message_router(session_manager):
    return MessageRouter(session_manager, strict_invariants=True)


@pytest.fixture
def settings():
    return GameServerSettings(cors_origins=["http://localhost:3000"], strict_invariants=True)


@pytest.fixture
def app(settings, session_manager, message_router):
    return create_app(
        settings=settings,
        session_manager=session_manager,
        message_router=message_router,
    )
