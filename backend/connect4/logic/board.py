"""
Pure board logic for the 6x7 gravity-drop grid.

A board is an immutable snapshot: a tuple of ROWS row tuples, each holding
COLUMNS cells. Row 0 is the top, row ROWS - 1 the bottom. A cell is None
when empty or the identifier of the participant who owns it. Nothing in
this module mutates its input or performs I/O.
"""

from typing import NamedTuple

from connect4.logic.exceptions import ColumnFullError

ROWS = 6
COLUMNS = 7
WIN_LENGTH = 4

type Cell = str | None
type Board = tuple[tuple[Cell, ...], ...]

# (row step, column step) in tie-break order: horizontal, vertical,
# diagonal down-right, diagonal up-right
_DIRECTIONS: tuple[tuple[int, int], ...] = ((0, 1), (1, 0), (1, 1), (-1, 1))


class Verdict(NamedTuple):
    """Terminal-state verdict for a board.

    winner is set when a run of four exists; draw is True only when the
    board is full and nobody won. Both unset means play continues.
    """

    winner: str | None = None
    draw: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.winner is not None or self.draw


def empty_board() -> Board:
    return tuple((None,) * COLUMNS for _ in range(ROWS))


def _validate_column(column: int) -> None:
    if not 0 <= column < COLUMNS:
        raise ValueError(f"column must be 0-{COLUMNS - 1}, got {column}")


def drop_result(board: Board, column: int) -> int:
    """Return the row a piece dropped into column would land on.

    Scans from the bottom row upward and returns the first empty row.
    Raises ColumnFullError when the column has no empty cell and ValueError
    when the column index is out of range.
    """
    _validate_column(column)
    for row in range(ROWS - 1, -1, -1):
        if board[row][column] is None:
            return row
    raise ColumnFullError


def place(board: Board, row: int, column: int, owner: str) -> Board:
    """Return a new board with the cell at (row, column) owned by owner."""
    _validate_column(column)
    if board[row][column] is not None:
        raise ValueError(f"cell ({row}, {column}) is already occupied")
    updated = list(board[row])
    updated[column] = owner
    return (*board[:row], tuple(updated), *board[row + 1 :])


def _run_owner(board: Board, row: int, column: int, d_row: int, d_col: int) -> Cell:
    """Return the owner of a WIN_LENGTH run starting at (row, column), or None."""
    owner = board[row][column]
    if owner is None:
        return None
    end_row = row + d_row * (WIN_LENGTH - 1)
    end_col = column + d_col * (WIN_LENGTH - 1)
    if not (0 <= end_row < ROWS and 0 <= end_col < COLUMNS):
        return None
    for step in range(1, WIN_LENGTH):
        if board[row + d_row * step][column + d_col * step] != owner:
            return None
    return owner


def check_winner(board: Board) -> str | None:
    """Return the owner of the first run of four found, or None.

    Cells are visited top to bottom, then left to right; at each cell the
    directions are tried in the order of _DIRECTIONS, so the result is
    deterministic even for boards that could not arise in play.
    """
    for row in range(ROWS):
        for column in range(COLUMNS):
            for d_row, d_col in _DIRECTIONS:
                owner = _run_owner(board, row, column, d_row, d_col)
                if owner is not None:
                    return owner
    return None


def is_full(board: Board) -> bool:
    # gravity fills bottom-up, so a full top row means a full board
    return all(cell is not None for cell in board[0])


def evaluate(board: Board) -> Verdict:
    winner = check_winner(board)
    if winner is not None:
        return Verdict(winner=winner)
    return Verdict(draw=is_full(board))


def to_wire(board: Board) -> list[list[Cell]]:
    """Convert a board snapshot into nested lists for JSON encoding."""
    return [list(row) for row in board]
