from typing import TYPE_CHECKING

from connect4.logic.board import COLUMNS, ROWS, Board
from connect4.tests.mocks import MockConnection

if TYPE_CHECKING:
    from connect4.session.manager import SessionManager


def board_from_rows(rows: list[str], owners: dict[str, str] | None = None) -> Board:
    """Build a board from ROWS strings of COLUMNS characters, top row first.

    '.' is an empty cell; any other character is looked up in owners
    (defaulting to the character itself) to get the owning id.
    """
    owners = owners or {}
    if len(rows) != ROWS or any(len(row) != COLUMNS for row in rows):
        raise ValueError(f"expected {ROWS} rows of {COLUMNS} cells")
    return tuple(tuple(None if ch == "." else owners.get(ch, ch) for ch in row) for row in rows)


async def connect(manager: SessionManager) -> tuple[str, MockConnection]:
    """Connect a fresh mock participant and return its id and connection."""
    conn = MockConnection()
    participant_id = await manager.handle_connect(conn)
    return participant_id, conn


async def create_active_match(
    manager: SessionManager,
) -> tuple[str, tuple[str, MockConnection], tuple[str, MockConnection]]:
    """Create a match with two participants; the founder is to move.

    Returns (match_id, (founder_id, founder_conn), (joiner_id, joiner_conn))
    with both outboxes cleared.
    """
    founder_id, founder_conn = await connect(manager)
    joiner_id, joiner_conn = await connect(manager)
    match = await manager.create_game(founder_id)
    assert match is not None
    joined = await manager.join_game(joiner_id, match.match_id)
    assert joined is not None
    founder_conn.clear()
    joiner_conn.clear()
    return match.match_id, (founder_id, founder_conn), (joiner_id, joiner_conn)
