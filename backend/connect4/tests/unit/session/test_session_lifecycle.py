"""Tests for connecting, creating and joining matches through SessionManager."""

from connect4.messaging.types import ServerMessageType
from connect4.session.manager import SessionManager
from connect4.tests.helpers import connect
from connect4.tests.mocks import MockConnection


class TestConnect:
    async def test_connect_assigns_and_sends_id(self, session_manager):
        conn = MockConnection()
        participant_id = await session_manager.handle_connect(conn)

        assert conn.sent_messages == [{"type": "user_id", "id": participant_id}]
        assert session_manager.participant_count == 1

    async def test_each_connection_gets_a_distinct_id(self, session_manager):
        first, _ = await connect(session_manager)
        second, _ = await connect(session_manager)
        assert first != second


class TestCreateGame:
    async def test_create_replies_with_snapshot(self, session_manager):
        alice, conn = await connect(session_manager)
        conn.clear()

        match = await session_manager.create_game(alice)

        assert match is not None
        assert conn.sent_messages == [
            {
                "type": "success",
                "message": "Game created",
                "game": {
                    "id": match.match_id,
                    "players": [alice],
                    "board": [[None] * 7 for _ in range(6)],
                    "currentPlayer": alice,
                },
            },
        ]
        assert session_manager.get_match(match.match_id) is match

    async def test_capacity_limit(self):
        manager = SessionManager(max_capacity=1)
        alice, conn = await connect(manager)
        await manager.create_game(alice)
        conn.clear()

        assert await manager.create_game(alice) is None
        assert conn.sent_messages == [{"type": "error", "message": "Server at capacity"}]
        assert manager.match_count == 1


class TestJoinGame:
    async def test_join_notifies_both_with_marks_then_turn(self, session_manager):
        alice, alice_conn = await connect(session_manager)
        bob, bob_conn = await connect(session_manager)
        match = await session_manager.create_game(alice)
        alice_conn.clear()
        bob_conn.clear()

        await session_manager.join_game(bob, match.match_id)

        for conn, mark, is_turn in ((alice_conn, "X", True), (bob_conn, "O", False)):
            joined, turn = conn.sent_messages
            assert joined["type"] == ServerMessageType.SUCCESS
            assert joined["message"] == "Game joined"
            assert joined["playing"] == mark
            assert joined["game"]["players"] == [alice, bob]
            assert joined["game"]["currentPlayer"] == alice
            assert turn == {"type": "current_player", "isYourTurn": is_turn}

    async def test_join_unknown_game(self, session_manager):
        bob, conn = await connect(session_manager)
        conn.clear()

        assert await session_manager.join_game(bob, "missing") is None
        assert conn.sent_messages == [{"type": "error", "message": "Game not found"}]

    async def test_join_full_game_errors_only_to_requester(self, session_manager):
        alice, alice_conn = await connect(session_manager)
        bob, bob_conn = await connect(session_manager)
        carol, carol_conn = await connect(session_manager)
        match = await session_manager.create_game(alice)
        await session_manager.join_game(bob, match.match_id)
        for conn in (alice_conn, bob_conn, carol_conn):
            conn.clear()

        assert await session_manager.join_game(carol, match.match_id) is None

        assert carol_conn.sent_messages == [
            {"type": "error", "message": "Game is full or you are already in the game"},
        ]
        assert alice_conn.sent_messages == []
        assert bob_conn.sent_messages == []
        assert match.participants == [alice, bob]

    async def test_join_own_game_rejected(self, session_manager):
        alice, conn = await connect(session_manager)
        match = await session_manager.create_game(alice)
        conn.clear()

        assert await session_manager.join_game(alice, match.match_id) is None
        assert conn.messages_of_type(ServerMessageType.ERROR) == [
            {"type": "error", "message": "Game is full or you are already in the game"},
        ]
