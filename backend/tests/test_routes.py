"""Tests for the REST endpoints."""


def test_root(api_client):
    response = api_client.get("/")
    assert response.status_code == 200
    assert response.json()["endpoints"]["websocket"] == "/ws"


def test_health(api_client):
    response = api_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "connections": 0,
        "registered_clients": 0,
        "rooms": 2,
        "active_rooms_with_members": 0,
    }


def test_metrics(api_client, chat):
    chat.message_counter = 3
    data = api_client.get("/metrics").json()
    assert data["total_messages"] == 3
    assert data["total_rooms"] == 2
    assert data["concurrent_connections"] == 0


def test_list_rooms(api_client):
    response = api_client.get("/rooms")
    assert response.status_code == 200
    assert [r["name"] for r in response.json()] == ["general", "random"]


def test_list_rooms_filtered(api_client):
    assert [r["name"] for r in api_client.get("/rooms", params={"name": "random"}).json()] == ["random"]
    assert api_client.get("/rooms", params={"name": "nope"}).json() == []


def test_create_room(api_client, chat):
    response = api_client.post("/rooms", json={"name": "lobby"})
    assert response.status_code == 200
    assert response.json() == {"name": "lobby", "member_count": 0, "history_length": 0}
    assert chat.store.get_by_name("lobby") is not None


def test_create_room_duplicate(api_client):
    response = api_client.post("/rooms", json={"name": "general"})
    assert response.status_code == 409
    assert response.json()["detail"] == "Chatroom general already exists"


def test_create_room_blank(api_client):
    response = api_client.post("/rooms", json={"name": "  "})
    assert response.status_code == 400


def test_create_room_notifies_websockets(api_client):
    with api_client.websocket_connect("/ws") as ws:
        api_client.post("/rooms", json={"name": "lobby"})
        update = ws.receive_json()
        assert update["type"] == "rooms_updated"
        assert [r["name"] for r in update["rooms"]] == ["general", "random", "lobby"]


def test_get_room(api_client):
    assert api_client.get("/rooms/general").json()["name"] == "general"
    missing = api_client.get("/rooms/ghost")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Invalid chatroom name: ghost"


def test_get_room_history(api_client):
    with api_client.websocket_connect("/ws") as ws:
        ws.send_json({"action": "register", "user_name": "alice"})
        ws.receive_json()
        ws.send_json({"action": "join", "room": "general"})
        ws.receive_json()
        ws.send_json({"action": "message", "room": "general", "message": "hi"})
        ws.receive_json()
        ws.receive_json()

        data = api_client.get("/rooms/general/history").json()
        assert data["room"] == "general"
        assert [e.get("event") or e.get("message") for e in data["history"]] == ["joined general", "hi"]

    assert api_client.get("/rooms/ghost/history").status_code == 404
