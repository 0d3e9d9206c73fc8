def test_health(client):
    assert client.get("/api/health").get_json() == {"ok": True}


def test_upsert_and_fetch_user(client):
    created = client.post("/api/users", json={"name": "Ana"}).get_json()
    assert created["name"] == "Ana"
    assert created["coins"] == 100

    profile = client.get(f"/api/users/{created['userId']}").get_json()
    assert profile == {"userId": created["userId"], "name": "Ana", "coins": 100, "friends": []}

    res = client.get("/api/users/missing")
    assert res.status_code == 404
    assert res.get_json() == {"error": "user_not_found"}


def test_friends_and_rankings(client, flask_app):
    res = client.post("/api/friends", json={"userId": "ana"})
    assert res.status_code == 400

    res = client.post("/api/friends", json={"userId": "ana", "friendId": "bia"})
    assert res.get_json() == {"friends": ["bia"]}
    assert client.get("/api/users/bia").get_json()["friends"] == ["ana"]

    assert client.post("/api/friends", json={"userId": "ana", "friendId": "ana"}).status_code == 400

    flask_app.extensions["adedonha"].registry.add_coins("bia", 30)
    ranking = client.get("/api/ranking").get_json()
    assert [u["userId"] for u in ranking] == ["bia", "ana"]

    assert [u["userId"] for u in client.get("/api/ranking/friends/ana").get_json()] == ["bia"]
    assert client.get("/api/ranking/friends/nobody").get_json() == []


def test_public_rooms_hide_password_rooms(client, make_sio_client):
    alice, bob = make_sio_client(), make_sio_client()
    alice.emit("room:create", {"name": "Open"}, callback=True)
    bob.emit("room:create", {"name": "Locked", "password": "pw"}, callback=True)

    rooms = client.get("/api/rooms").get_json()
    assert [r["name"] for r in rooms] == ["Open"]
    assert rooms[0]["hasPassword"] is False
