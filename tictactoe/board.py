from __future__ import annotations

from typing import List, Literal, Optional, Tuple

Mark = Literal["X", "O"]
Cell = Optional[Mark]
Board = Tuple[Cell, ...]
Line = Tuple[int, int, int]

SIZE = 9
WIN_LINES: Tuple[Line, ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


def empty_board() -> Board:
    return (None,) * SIZE


def empty_cells(board: Board) -> List[int]:
    return [i for i, value in enumerate(board) if value is None]


def is_full(board: Board) -> bool:
    return all(value is not None for value in board)


def place(board: Board, index: int, mark: Mark) -> Board:
    """Return a copy of ``board`` with ``mark`` written at ``index``."""
    if not 0 <= index < SIZE:
        raise ValueError(f"cell index must be between 0 and {SIZE - 1}, got {index}")
    if board[index] is not None:
        raise ValueError(f"cell {index} is already occupied by {board[index]}")
    cells = list(board)
    cells[index] = mark
    return tuple(cells)


def winning_line(board: Board) -> Optional[Line]:
    # first completed line in declared order wins
    for a, b, c in WIN_LINES:
        if board[a] is not None and board[a] == board[b] == board[c]:
            return (a, b, c)
    return None


def detect_winner(board: Board) -> Optional[Mark]:
    line = winning_line(board)
    if line is None:
        return None
    return board[line[0]]


def line_type(line: Line) -> str:
    index = WIN_LINES.index(line)
    if index < 3:
        return "row"
    if index < 6:
        return "col"
    return "diag"


def to_cell(index: int) -> Tuple[int, int]:
    return divmod(index, 3)


def from_cell(row: int, col: int) -> int:
    return 3 * row + col


def render(board: Board) -> str:
    rows = []
    for r in range(3):
        rows.append(" " + " | ".join(board[3 * r + c] or " " for c in range(3)))
    return "\n---+---+---\n".join(rows)
