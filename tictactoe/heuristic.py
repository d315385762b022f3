"""Greedy opponent for the computer variant.

The picker looks at the eight winning lines in their declared order and
takes the first line that matches the current tier:

1. win now: two of its own marks and one empty cell
2. block: two of the opponent's marks and one empty cell
3. extend: one of its own marks and two empty cells
4. otherwise the lowest empty cell

It does not look ahead, so forks go unnoticed and it can be beaten.
"""

from __future__ import annotations

from typing import Optional

from .board import WIN_LINES, Board, Mark, empty_cells


def _complete(board: Board, mark: Mark) -> Optional[int]:
    for a, b, c in WIN_LINES:
        if board[a] == mark and board[b] == mark and board[c] is None:
            return c
        if board[a] == mark and board[b] is None and board[c] == mark:
            return b
        if board[a] is None and board[b] == mark and board[c] == mark:
            return a
    return None


def _extend(board: Board, mark: Mark) -> Optional[int]:
    for a, b, c in WIN_LINES:
        if board[a] == mark and board[b] is None and board[c] is None:
            return c
        if board[a] is None and board[b] == mark and board[c] is None:
            return a
        if board[a] is None and board[b] is None and board[c] == mark:
            return a
    return None


def select_move(board: Board, own: Mark = "O", opponent: Mark = "X") -> Optional[int]:
    """Index of the cell ``own`` should take next, or None on a full board."""
    move = _complete(board, own)
    if move is not None:
        return move

    move = _complete(board, opponent)
    if move is not None:
        return move

    move = _extend(board, own)
    if move is not None:
        return move

    free = empty_cells(board)
    return free[0] if free else None
