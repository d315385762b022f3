"""Game state and turn handling for the three variants.

``classic``  two players on one board, no history
``history``  two players, every turn is kept and can be revisited
``computer`` a human (X) against the heuristic opponent (O), with history

A ``GameState`` is never modified. ``handle_click``, ``jump_to`` and
``restart`` return a new state, or the very same object when the click
is ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from . import config
from .board import (
    SIZE,
    Board,
    Mark,
    detect_winner,
    empty_board,
    is_full,
    line_type,
    render,
    to_cell,
    winning_line,
)
from .heuristic import select_move


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameState:
    variant: str
    history: Tuple[Board, ...]
    step: int = 0

    @property
    def keeps_history(self) -> bool:
        return self.variant != "classic"

    @property
    def against_computer(self) -> bool:
        return self.variant == "computer"


def new_game(variant: Optional[str] = None) -> GameState:
    variant = variant or config.get_settings().default_variant
    if variant not in config.VARIANTS:
        raise ValueError(f"unknown variant {variant!r}, expected one of {config.VARIANTS}")
    return GameState(variant=variant, history=(empty_board(),), step=0)


def restart(state: GameState) -> GameState:
    return new_game(state.variant)


def current_board(state: GameState) -> Board:
    return state.history[state.step]


def next_player(state: GameState) -> Mark:
    if state.against_computer:
        return config.HUMAN_MARK
    marks = sum(1 for value in current_board(state) if value is not None)
    return "X" if marks % 2 == 0 else "O"


def handle_click(state: GameState, index: int) -> GameState:
    if not 0 <= index < SIZE:
        raise ValueError(f"cell index must be between 0 and {SIZE - 1}, got {index}")

    history = state.history[: state.step + 1]
    squares = list(history[-1])

    # game already won or square already taken
    if detect_winner(tuple(squares)) or squares[index] is not None:
        return state

    squares[index] = next_player(state)

    if state.against_computer:
        board = tuple(squares)
        if detect_winner(board) is None and not is_full(board):
            move = select_move(board, own=config.COMPUTER_MARK, opponent=config.HUMAN_MARK)
            squares[move] = config.COMPUTER_MARK

    board = tuple(squares)
    logger.debug("%s game, move at %d:\n%s", state.variant, index, render(board))

    if not state.keeps_history:
        return replace(state, history=(board,), step=0)

    history = history + (board,)
    return replace(state, history=history, step=len(history) - 1)


def jump_to(state: GameState, step: int) -> GameState:
    if not state.keeps_history:
        raise ValueError(f"the {state.variant} variant keeps no move history")
    if not 0 <= step < len(state.history):
        raise ValueError(f"step must be between 0 and {len(state.history) - 1}, got {step}")
    return replace(state, step=step)


def status_text(state: GameState) -> str:
    winner = detect_winner(current_board(state))
    if winner:
        return "Winner: " + winner
    if state.against_computer:
        return ""
    return "Next player: " + next_player(state)


def game_status(state: GameState) -> Dict[str, object]:
    board = current_board(state)
    line = winning_line(board)
    if line is not None:
        return {
            "status": "win",
            "winner": board[line[0]],
            "line_type": line_type(line),
            "cells": [to_cell(i) for i in line],
        }

    if is_full(board):
        return {
            "status": "tie",
            "winner": None,
            "line_type": None,
            "cells": [],
        }

    return {
        "status": "ongoing",
        "winner": None,
        "line_type": None,
        "cells": [],
    }


def move_labels(state: GameState) -> List[str]:
    if not state.keeps_history:
        return []
    return ["Go to move #" + str(move) if move else "Go to game start" for move in range(len(state.history))]


def computer_move(previous: GameState, state: GameState) -> Optional[int]:
    """Cell the computer filled when ``previous`` became ``state``, if any."""
    if not state.against_computer or state is previous:
        return None
    before = current_board(previous)
    for index, value in enumerate(current_board(state)):
        if value == config.COMPUTER_MARK and before[index] is None:
            return index
    return None
