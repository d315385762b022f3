import logging
import time
from typing import Literal

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect

from .. import config
from .. import game
from .common import (
    MOVE_HINT,
    GamePayload,
    active_game_count,
    evict_stale_sessions,
    register_sessions,
    run_session,
    websocket_is_open,
    ws_state_message,
)


router = APIRouter()
logger = logging.getLogger(__name__)
active_games = {}
active_player_ids = set()
register_sessions(active_games, active_player_ids)


class OfflinePayload(GamePayload):
    variant: Literal["classic", "history"] = "history"


@router.post("/offline")
async def offline(payload: OfflinePayload):
    game_id = payload.game_id
    player_id = payload.player_id
    settings = config.get_settings()
    evict_stale_sessions(settings.pending_timeout)

    if game_id in active_games:
        raise HTTPException(status_code=400, detail="game_id must be unique")
    if player_id in active_player_ids:
        raise HTTPException(status_code=400, detail="player_id must be unique")
    if active_game_count() >= settings.max_games:
        raise HTTPException(status_code=400, detail="too many active games")

    active_games[game_id] = {
        "game_id": game_id,
        "player_id": player_id,
        "state": game.new_game(payload.variant),
        "connected": False,
        "created_at": time.monotonic(),
    }
    active_player_ids.add(player_id)
    logger.info("created %s game %s for %s", payload.variant, game_id, player_id)
    return {"ws_path": f"/ws/{game_id}"}


@router.get("/offline/{game_id}")
async def offline_state(game_id: str):
    session = active_games.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Game not found.")
    return ws_state_message(session["state"])


@router.websocket("/ws/{game_id}")
async def websocket_game(websocket: WebSocket, game_id: str):
    await websocket.accept()
    session = active_games.get(game_id)
    if session is None:
        await websocket.send_json({"error": "Game not found."})
        await websocket.close()
        return
    if session["connected"]:
        await websocket.send_json({"error": "Game already has an active connection."})
        await websocket.close()
        return

    session["connected"] = True

    try:
        state = session["state"]
        greeting = f"Game started ({state.variant}). {game.next_player(state)} goes first. {MOVE_HINT}"
        await run_session(websocket, session, greeting)
    except WebSocketDisconnect:
        pass
    except Exception as exc:
        logger.exception("Offline backend error for game_id=%s: %s", game_id, exc)
        if websocket_is_open(websocket):
            await websocket.close()
    finally:
        if game_id in active_games:
            active_player_ids.discard(active_games[game_id]["player_id"])
            del active_games[game_id]
            logger.info("closed game %s", game_id)
