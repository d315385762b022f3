from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from . import config
from . import game
from .board import from_cell, render


logger = logging.getLogger(__name__)

HELP = "Commands: '<index>' (0-8), '<row> <col>' (0-2), 'jump <step>', 'restart', 'quit'"


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Tic-tac-toe in the terminal")
    parser.add_argument(
        "--variant",
        choices=config.VARIANTS,
        default=config.get_settings().default_variant,
        help="classic: two players, history: two players with time travel, computer: you (X) against O",
    )
    return parser.parse_args(argv)


def show(state: game.GameState) -> None:
    status = game.status_text(state)
    if status:
        print(status)
    print(render(game.current_board(state)))
    print()
    labels = game.move_labels(state)
    for step, label in enumerate(labels):
        marker = ">" if step == state.step else " "
        print(f"{marker} {step}. {label}")
    if labels:
        print()


def read_index(parts):
    if len(parts) == 1 and parts[0].isdecimal():
        index = int(parts[0])
        if not 0 <= index <= 8:
            print("Index must be between 0 and 8.")
            return None
        return index
    if len(parts) == 2 and all(p.isdecimal() for p in parts):
        h, w = int(parts[0]), int(parts[1])
        if not (0 <= h <= 2 and 0 <= w <= 2):
            print("Coordinates must be between 0 and 2.")
            return None
        return from_cell(h, w)
    print("Invalid input. " + HELP)
    return None


def run(state: game.GameState) -> game.GameState:
    print(HELP)
    print()
    show(state)

    while True:
        try:
            user_input = input("> ").strip().lower()
        except EOFError:
            print("\nInput ended.")
            return state

        if user_input == "quit":
            print("Bye.")
            return state

        if user_input == "restart":
            state = game.restart(state)
            show(state)
            continue

        parts = user_input.split()
        if parts and parts[0] == "jump":
            if len(parts) != 2 or not parts[1].isdecimal():
                print("Usage: jump <step>")
                continue
            try:
                state = game.jump_to(state, int(parts[1]))
            except ValueError as exc:
                print(exc)
                continue
            show(state)
            continue

        index = read_index(parts)
        if index is None:
            continue

        before = state
        state = game.handle_click(state, index)
        if state is before:
            print("Move ignored. Cell is occupied or game already finished.")
            continue

        ai_move = game.computer_move(before, state)
        if ai_move is not None:
            print(f"Computer plays: {ai_move}")
        show(state)
        if game.game_status(state)["status"] == "tie":
            print("Board full, nobody wins.")


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=config.get_settings().log_level, format="%(levelname)s %(name)s: %(message)s")
    logger.info("starting %s game", args.variant)
    print(f"Tic_Tac_Toe_game ({args.variant})")
    run(game.new_game(args.variant))


if __name__ == "__main__":
    main()
