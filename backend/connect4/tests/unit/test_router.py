import logging

import pytest

from connect4.logic.exceptions import InvariantViolationError
from connect4.messaging.router import MessageRouter
from connect4.session.manager import SessionManager
from connect4.session.registry import ConnectionRegistry
from connect4.tests.mocks import MockConnection


class TestMessageRouter:
    async def test_connect_returns_assigned_id(self, message_router):
        conn = MockConnection()
        participant_id = await message_router.handle_connect(conn)
        assert conn.sent_messages == [{"type": "user_id", "id": participant_id}]

    async def test_create_game(self, message_router, session_manager):
        conn = MockConnection()
        alice = await message_router.handle_connect(conn)
        conn.clear()

        await message_router.handle_message(alice, {"type": "create_game"})

        (reply,) = conn.sent_messages
        assert reply["message"] == "Game created"
        assert session_manager.match_count == 1

    async def test_join_and_move_with_client_field_names(self, message_router, session_manager):
        alice_conn, bob_conn = MockConnection(), MockConnection()
        alice = await message_router.handle_connect(alice_conn)
        bob = await message_router.handle_connect(bob_conn)
        await message_router.handle_message(alice, {"type": "create_game", "userId": alice})
        match_id = alice_conn.sent_messages[-1]["game"]["id"]

        await message_router.handle_message(bob, {"type": "join_game", "gameId": match_id, "userId": bob})
        await message_router.handle_message(alice, {"type": "make_move", "gameId": match_id, "col": 6})

        match = session_manager.get_match(match_id)
        assert match.participants == [alice, bob]
        assert match.board[-1][6] == alice
        assert match.current_player == bob

    async def test_register_is_ignored(self, message_router):
        conn = MockConnection()
        alice = await message_router.handle_connect(conn)
        conn.clear()

        await message_router.handle_message(alice, {"type": "register", "userId": "someone-else"})

        assert conn.sent_messages == []

    @pytest.mark.parametrize(
        "raw",
        [
            {"type": "unknown"},
            {"no_type": True},
            {"type": "join_game"},
            {"type": "make_move", "gameId": "g1"},
            {"type": "make_move", "gameId": "g1", "column": 7},
            {"type": "make_move", "gameId": "g1", "column": -1},
            {"type": "join_game", "gameId": ""},
        ],
    )
    async def test_malformed_requests_get_no_reply(self, message_router, session_manager, raw, caplog):
        conn = MockConnection()
        alice = await message_router.handle_connect(conn)
        conn.clear()

        with caplog.at_level(logging.WARNING, logger="connect4.messaging.router"):
            await message_router.handle_message(alice, raw)

        assert conn.sent_messages == []
        assert session_manager.match_count == 0
        assert "ignoring malformed message" in caplog.text

    async def test_rule_errors_reach_the_sender(self, message_router):
        conn = MockConnection()
        alice = await message_router.handle_connect(conn)
        conn.clear()

        await message_router.handle_message(alice, {"type": "join_game", "gameId": 12345})

        assert conn.sent_messages == [{"type": "error", "message": "Game not found"}]


class TestInvariantHandling:
    @staticmethod
    async def _orphan_match_move(router: MessageRouter, manager: SessionManager) -> None:
        """Leave a match whose other participant was never registered, then move in it."""
        conn = MockConnection()
        alice = await router.handle_connect(conn)
        await router.handle_message(alice, {"type": "create_game"})
        match_id = conn.sent_messages[-1]["game"]["id"]
        manager.get_match(match_id).participants.append("ghost")
        await router.handle_message(alice, {"type": "make_move", "gameId": match_id, "column": 0})

    async def test_strict_router_reraises(self):
        manager = SessionManager(registry=ConnectionRegistry(strict=True))
        router = MessageRouter(manager, strict_invariants=True)

        with pytest.raises(InvariantViolationError):
            await self._orphan_match_move(router, manager)

    async def test_lenient_router_logs_and_continues(self, caplog):
        manager = SessionManager(registry=ConnectionRegistry(strict=True))
        router = MessageRouter(manager, strict_invariants=False)

        with caplog.at_level(logging.ERROR, logger="connect4.messaging.router"):
            await self._orphan_match_move(router, manager)

        assert "invariant violation" in caplog.text

    async def test_lenient_registry_drops_the_send(self):
        manager = SessionManager(registry=ConnectionRegistry(strict=False))
        router = MessageRouter(manager, strict_invariants=True)

        await self._orphan_match_move(router, manager)
