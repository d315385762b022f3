import logging
import time
from json import JSONDecodeError

from fastapi import WebSocket
from pydantic import BaseModel, field_validator

from .. import game
from ..board import SIZE, from_cell, to_cell


logger = logging.getLogger(__name__)

MOVE_HINT = "Send moves as {'type': 'click', 'index': 0} or {'row': 0, 'col': 0}."

# (games, player_ids) of every router; the game cap covers all of them
session_tables = []


class GamePayload(BaseModel):
    game_id: str
    player_id: str

    @field_validator("game_id", "player_id", mode="before")
    @classmethod
    def validate_and_strip_id(cls, value):
        if not isinstance(value, str):
            raise ValueError("must be a string")
        stripped = value.strip()
        if stripped == "":
            raise ValueError("must not be empty")
        return stripped


def websocket_is_open(websocket):
    return getattr(getattr(websocket, "client_state", None), "name", "") != "DISCONNECTED"


def ws_state_message(state, note="", ai_move=None):
    board = game.current_board(state)
    status = game.game_status(state)
    payload = {
        "variant": state.variant,
        "board": [[board[3 * h + w] or "" for w in range(3)] for h in range(3)],
        "squares": list(board),
        "status": game.status_text(state),
        "game_status": status["status"],
        "next_player": game.next_player(state),
        "step": state.step,
        "history_length": len(state.history),
        "moves": game.move_labels(state),
    }
    if status["status"] == "win":
        payload["winner"] = status["winner"]
        payload["line_type"] = status["line_type"]
        payload["cells"] = status["cells"]
    if ai_move is not None:
        payload["ai_move"] = ai_move
    if note:
        payload["message"] = note
    return payload


def _click_index(raw):
    if "index" in raw:
        index = raw.get("index")
        if type(index) is not int:
            return None, "Invalid payload. index must be an integer."
        if not 0 <= index < SIZE:
            return None, f"Index must be between 0 and {SIZE - 1}."
        return index, ""

    h = raw.get("row")
    w = raw.get("col")
    if type(h) is not int or type(w) is not int:
        return None, "Invalid payload. row and col must be integers."
    if not (0 <= h <= 2 and 0 <= w <= 2):
        return None, "Coordinates must be between 0 and 2."
    return from_cell(h, w), ""


def apply_message(state, raw):
    """Apply one client message. Returns ``(state, note, ai_move)``."""
    if not isinstance(raw, dict):
        return state, "Invalid payload. Use JSON object.", None

    kind = raw.get("type", "click")

    if kind == "restart":
        return game.restart(state), "New game started.", None

    if kind == "jump":
        step = raw.get("step")
        if not state.keeps_history:
            return state, f"The {state.variant} variant has no move history.", None
        if type(step) is not int:
            return state, "Invalid payload. step must be an integer.", None
        if not 0 <= step < len(state.history):
            return state, f"Step must be between 0 and {len(state.history) - 1}.", None
        return game.jump_to(state, step), f"Jumped to step {step}.", None

    if kind != "click":
        return state, f"Unknown message type {kind!r}.", None

    index, note = _click_index(raw)
    if index is None:
        return state, note, None

    new_state = game.handle_click(state, index)
    if new_state is state:
        return state, "Move ignored. Cell is occupied or game already finished.", None

    note = "Move accepted."
    ai_move = None
    move = game.computer_move(state, new_state)
    if move is not None:
        h, w = to_cell(move)
        ai_move = {"row": h, "col": w}
        note = f"{note} AI played at ({h}, {w})."

    status = game.game_status(new_state)
    if status["status"] == "win":
        note = f"Win details: type={status['line_type']}, cells={status['cells']}"
    elif status["status"] == "tie":
        note = "Game over: tie."
    return new_state, note, ai_move


async def run_session(websocket: WebSocket, session, greeting):
    """Serve one game over ``websocket`` until the client quits or disconnects."""
    game_id = session["game_id"]
    await websocket.send_json(ws_state_message(session["state"], greeting))

    while True:
        try:
            raw = await websocket.receive_json()
        except JSONDecodeError:
            note = "Invalid JSON payload. Use JSON object."
            await websocket.send_json(ws_state_message(session["state"], note))
            continue

        if isinstance(raw, dict) and raw.get("type") == "quit":
            logger.info("[ws %s] client quit", game_id)
            await websocket.close()
            return

        state, note, ai_move = apply_message(session["state"], raw)
        if state is not session["state"]:
            logger.debug("[ws %s] %s", game_id, game.status_text(state) or note)
        session["state"] = state
        await websocket.send_json(ws_state_message(state, note, ai_move))


def register_sessions(games, player_ids):
    session_tables.append((games, player_ids))


def active_game_count():
    return sum(len(games) for games, _ in session_tables)


def evict_stale_sessions(timeout):
    """Drop games whose WebSocket never connected within ``timeout`` seconds."""
    now = time.monotonic()
    for games, player_ids in session_tables:
        for game_id, session in list(games.items()):
            if not session["connected"] and now - session["created_at"] > timeout:
                player_ids.discard(session["player_id"])
                del games[game_id]
                logger.info("dropped game %s, no connection after %.0fs", game_id, timeout)
