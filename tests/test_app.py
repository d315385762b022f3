"""Tests for the HTTP and WebSocket routes."""

import time

from fastapi.testclient import TestClient

from tictactoe import game
from tictactoe.app import ai, offline
from tictactoe.app.common import apply_message, ws_state_message


def create_offline(client, game_id="g1", player_id="p1", **extra):
    response = client.post("/offline", json={"game_id": game_id, "player_id": player_id, **extra})
    assert response.status_code == 200
    return response.json()["ws_path"]


def test_create_offline_game(client: TestClient) -> None:
    assert create_offline(client, game_id="  g1 ") == "/ws/g1"
    assert offline.active_games["g1"]["state"].variant == "history"


def test_duplicate_ids_are_rejected(client: TestClient) -> None:
    create_offline(client)
    response = client.post("/offline", json={"game_id": "g1", "player_id": "p2"})
    assert response.status_code == 400
    assert response.json()["detail"] == "game_id must be unique"

    response = client.post("/offline", json={"game_id": "g2", "player_id": "p1"})
    assert response.status_code == 400
    assert response.json()["detail"] == "player_id must be unique"


def test_invalid_payloads_are_rejected(client: TestClient) -> None:
    assert client.post("/offline", json={"game_id": "  ", "player_id": "p1"}).status_code == 422
    assert client.post("/offline", json={"game_id": 3, "player_id": "p1"}).status_code == 422
    response = client.post("/offline", json={"game_id": "g1", "player_id": "p1", "variant": "computer"})
    assert response.status_code == 422


def test_game_cap(client: TestClient, use_settings) -> None:
    use_settings(max_games=1)
    create_offline(client)
    response = client.post("/offline", json={"game_id": "g2", "player_id": "p2"})
    assert response.status_code == 400


def test_game_cap_covers_both_routers(client: TestClient, use_settings) -> None:
    use_settings(max_games=1)
    create_offline(client)
    response = client.post("/ai", json={"game_id": "a1", "player_id": "p2"})
    assert response.status_code == 400
    assert response.json()["detail"] == "too many active games"


def test_unconnected_games_are_dropped(client: TestClient, use_settings) -> None:
    use_settings(max_games=2, pending_timeout=60)
    create_offline(client, game_id="g1", player_id="p1")
    create_offline(client, game_id="g2", player_id="p2")
    offline.active_games["g1"]["created_at"] = time.monotonic() - 120

    assert create_offline(client, game_id="g3", player_id="p3") == "/ws/g3"
    assert "g1" not in offline.active_games
    assert "p1" not in offline.active_player_ids
    assert "g2" in offline.active_games


def test_dropped_game_frees_player_id(client: TestClient, use_settings) -> None:
    use_settings(pending_timeout=60)
    client.post("/ai", json={"game_id": "a1", "player_id": "p1"})
    ai.active_ai_games["a1"]["created_at"] = time.monotonic() - 120

    response = client.post("/ai", json={"game_id": "a2", "player_id": "p1"})
    assert response.status_code == 200
    assert list(ai.active_ai_games) == ["a2"]


def test_connected_games_are_kept(client: TestClient, use_settings) -> None:
    use_settings(pending_timeout=60)
    ws_path = create_offline(client)
    with client.websocket_connect(ws_path) as websocket:
        websocket.receive_json()
        offline.active_games["g1"]["created_at"] = time.monotonic() - 120
        create_offline(client, game_id="g2", player_id="p2")
        assert "g1" in offline.active_games


def test_get_state(client: TestClient) -> None:
    assert client.get("/offline/missing").status_code == 404
    create_offline(client, variant="classic")
    data = client.get("/offline/g1").json()
    assert data["variant"] == "classic"
    assert data["board"] == [["", "", ""], ["", "", ""], ["", "", ""]]
    assert data["status"] == "Next player: X"
    assert data["moves"] == []


def test_offline_websocket_game(client: TestClient) -> None:
    ws_path = create_offline(client)
    with client.websocket_connect(ws_path) as websocket:
        data = websocket.receive_json()
        assert data["message"].startswith("Game started (history). X goes first.")
        assert data["game_status"] == "ongoing"

        websocket.send_json({"type": "click", "index": 4})
        data = websocket.receive_json()
        assert data["board"][1][1] == "X"
        assert data["status"] == "Next player: O"
        assert data["message"] == "Move accepted."

        websocket.send_json({"row": 0, "col": 0})
        data = websocket.receive_json()
        assert data["board"][0][0] == "O"
        assert data["history_length"] == 3
        assert data["moves"] == ["Go to game start", "Go to move #1", "Go to move #2"]

        websocket.send_json({"type": "click", "index": 4})
        data = websocket.receive_json()
        assert data["message"] == "Move ignored. Cell is occupied or game already finished."

        websocket.send_json({"type": "jump", "step": 1})
        data = websocket.receive_json()
        assert data["step"] == 1
        assert data["board"][0][0] == ""
        assert data["history_length"] == 3

        websocket.send_json({"type": "click", "index": 8})
        data = websocket.receive_json()
        assert data["step"] == 2
        assert data["history_length"] == 3
        assert data["squares"] == [None, None, None, None, "X", None, None, None, "O"]

    assert "g1" not in offline.active_games
    assert "p1" not in offline.active_player_ids


def test_websocket_bad_messages(client: TestClient) -> None:
    ws_path = create_offline(client)
    with client.websocket_connect(ws_path) as websocket:
        websocket.receive_json()

        websocket.send_text("not json")
        assert websocket.receive_json()["message"] == "Invalid JSON payload. Use JSON object."

        websocket.send_json([1, 2])
        assert websocket.receive_json()["message"] == "Invalid payload. Use JSON object."

        websocket.send_json({"row": "a", "col": 1})
        assert websocket.receive_json()["message"] == "Invalid payload. row and col must be integers."

        websocket.send_json({"row": 3, "col": 1})
        assert websocket.receive_json()["message"] == "Coordinates must be between 0 and 2."

        websocket.send_json({"type": "click", "index": 9})
        assert websocket.receive_json()["message"] == "Index must be between 0 and 8."

        websocket.send_json({"type": "jump", "step": 5})
        assert websocket.receive_json()["message"] == "Step must be between 0 and 0."

        websocket.send_json({"type": "dance"})
        assert websocket.receive_json()["message"] == "Unknown message type 'dance'."


def test_unknown_game_websocket(client: TestClient) -> None:
    with client.websocket_connect("/ws/missing") as websocket:
        assert websocket.receive_json() == {"error": "Game not found."}


def test_ai_websocket_game(client: TestClient) -> None:
    response = client.post("/ai", json={"game_id": "a1", "player_id": "p1"})
    assert response.json() == {"ws_path": "/ws/ai/a1"}

    with client.websocket_connect("/ws/ai/a1") as websocket:
        data = websocket.receive_json()
        assert data["variant"] == "computer"
        assert data["status"] == ""

        websocket.send_json({"type": "click", "index": 4})
        data = websocket.receive_json()
        assert data["ai_move"] == {"row": 0, "col": 0}
        assert data["message"] == "Move accepted. AI played at (0, 0)."
        assert data["history_length"] == 2

        websocket.send_json({"type": "click", "index": 8})
        websocket.receive_json()
        websocket.send_json({"type": "click", "index": 7})
        data = websocket.receive_json()
        assert data["status"] == "Winner: O"
        assert data["winner"] == "O"
        assert data["line_type"] == "row"
        assert data["cells"] == [[0, 0], [0, 1], [0, 2]]

        websocket.send_json({"type": "restart"})
        data = websocket.receive_json()
        assert data["history_length"] == 1
        assert data["message"] == "New game started."

        websocket.send_json({"type": "quit"})

    assert "a1" not in ai.active_ai_games


def test_apply_message_jump_on_classic() -> None:
    state = game.new_game("classic")
    new_state, note, ai_move = apply_message(state, {"type": "jump", "step": 0})
    assert new_state is state
    assert note == "The classic variant has no move history."
    assert ai_move is None


def test_ws_state_message_tie() -> None:
    state = game.new_game("history")
    for index in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        state = game.handle_click(state, index)
    payload = ws_state_message(state, "done")
    assert payload["game_status"] == "tie"
    assert "winner" not in payload
    assert payload["message"] == "done"
