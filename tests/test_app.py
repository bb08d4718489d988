import pytest


EMPTY_BOARD = [""] * 9


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok"}


def test_callable_envelope(client):
    res = client.post("/getAiMove", json={"data": {"board": EMPTY_BOARD, "player": "X", "difficulty": "hard"}})
    assert res.status_code == 200
    assert res.get_json() == {"result": {"move": 4}}


def test_bare_payload(client):
    board = ["X", "X", "", "O", "O", "", "", "", ""]
    res = client.post("/getAiMove", json={"board": board, "player": "X"})
    assert res.get_json() == {"result": {"move": 2}}


def test_multi_board_payload(client):
    boards = [["X", "X", "X", "O", "O", "", "", "", ""],
              ["X", "X", "", "O", "", "", "", "O", ""],
              [""] * 9]
    data = {"boards": boards, "boardOutcomes": ["X", None, None], "player": "X", "boardCount": 3}
    res = client.post("/getAiMove", json={"data": data})
    assert res.get_json() == {"result": {"boardIndex": 1, "cellIndex": 2}}


def test_finished_match_payload(client):
    data = {"boards": [EMPTY_BOARD] * 3, "boardOutcomes": ["X", "O", "D"], "player": "O"}
    res = client.post("/getAiMove", json={"data": data})
    assert res.get_json() == {"result": {"move": -1}}


def test_invalid_board_is_rejected(client):
    res = client.post("/getAiMove", json={"data": {"board": [""] * 8, "player": "X"}})
    assert res.status_code == 400
    body = res.get_json()
    assert body["error"]["status"] == "INVALID_ARGUMENT"
    assert "9 cells" in body["error"]["message"]


def test_missing_body_is_rejected(client):
    res = client.post("/getAiMove", data="not json", content_type="text/plain")
    assert res.status_code == 400
    assert res.get_json()["error"]["status"] == "INVALID_ARGUMENT"


def test_default_difficulty_from_config(client, flask_app, monkeypatch):
    monkeypatch.setitem(flask_app.config, "AI_DEFAULT_DIFFICULTY", "easy")
    monkeypatch.setitem(flask_app.config, "AI_RANDOM_SEED", None)
    board = ["X", "X", "", "O", "O", "", "", "", ""]
    seen = {client.post("/getAiMove", json={"board": board, "player": "X"}).get_json()["result"]["move"]
            for _ in range(40)}
    assert len(seen) > 1


def test_seeded_requests_repeat(client, flask_app, monkeypatch):
    monkeypatch.setitem(flask_app.config, "AI_RANDOM_SEED", 42)
    payload = {"data": {"board": EMPTY_BOARD, "player": "O", "difficulty": "easy"}}
    first = client.post("/getAiMove", json=payload).get_json()
    assert all(client.post("/getAiMove", json=payload).get_json() == first for _ in range(5))


def test_socket_move(socket_client):
    ack = socket_client.emit("getAiMove", {"board": EMPTY_BOARD, "player": "X"}, callback=True)
    assert ack == {"move": 4}
    received = socket_client.get_received()
    assert [r["name"] for r in received] == ["aiMove"]
    assert received[0]["args"][0] == {"move": 4}


def test_socket_invalid(socket_client):
    ack = socket_client.emit("getAiMove", {"boards": "nope", "player": "X"}, callback=True)
    assert "error" in ack
    received = socket_client.get_received()
    assert received[0]["name"] == "aiMoveError"
    assert "boards must be a list" in received[0]["args"][0]["message"]


def test_config_defaults():
    from app import load_ai_config
    assert load_ai_config({}) == {"AI_DEFAULT_DIFFICULTY": "hard", "AI_RANDOM_SEED": None, "LOG_LEVEL": "INFO"}
    cfg = load_ai_config({"AI_DEFAULT_DIFFICULTY": " Easy ", "AI_RANDOM_SEED": "7", "LOG_LEVEL": "debug"})
    assert cfg == {"AI_DEFAULT_DIFFICULTY": "easy", "AI_RANDOM_SEED": 7, "LOG_LEVEL": "DEBUG"}


@pytest.mark.parametrize("environ,name", [
    ({"AI_DEFAULT_DIFFICULTY": "impossible"}, "AI_DEFAULT_DIFFICULTY"),
    ({"AI_RANDOM_SEED": "abc"}, "AI_RANDOM_SEED"),
    ({"LOG_LEVEL": "LOUD"}, "LOG_LEVEL"),
])
def test_bad_config_fails_at_startup(environ, name):
    from app import load_ai_config
    with pytest.raises(RuntimeError, match=name):
        load_ai_config(environ)
