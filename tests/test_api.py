"""End-to-end HTTP tests through the FastAPI app."""

from fastapi.testclient import TestClient

from conftest import login, register
from pairdiary.main import app
from pairdiary.services import identity_service


def _solo_pair_id(client, headers) -> str:
    r = client.get("/api/pairs", headers=headers)
    assert r.status_code == 200
    pairs = r.json()["data"]["pairs"]
    assert pairs[0]["is_solo"]
    return pairs[0]["id"]


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "running"
    assert client.get("/api/health").json() == {"status": "ok"}


def test_friends_share_a_diary(client):
    register(client, "alice")
    bob_data = register(client, "bob")
    alice = login(client, "alice")
    bob = login(client, "bob")

    solo = client.get("/api/pairs", headers=alice).json()["data"]["pairs"]
    assert len(solo) == 1
    assert solo[0]["is_solo"]
    assert solo[0]["status"] == "solo"

    found = client.get(f"/api/friends/search/{bob_data['account_id']}", headers=alice).json()["data"]
    assert found["user"]["username"] == "bob"
    assert found["friendship"] is None

    r = client.post("/api/friends/request", json={"receiver_id": bob_data["id"]}, headers=alice)
    assert r.status_code == 200
    request_id = r.json()["data"]["id"]

    requests = client.get("/api/friends/requests", headers=bob).json()["data"]["requests"]
    assert [(q["id"], q["username"]) for q in requests] == [(request_id, "alice")]
    sent = client.get("/api/friends/requests/sent", headers=alice).json()["data"]["requests"]
    assert [q["username"] for q in sent] == ["bob"]

    r = client.post(f"/api/friends/accept/{request_id}", headers=bob)
    assert r.status_code == 200
    pair_id = r.json()["data"]["pair_id"]

    friends = client.get("/api/friends", headers=alice).json()["data"]["friends"]
    assert friends[0]["friend_username"] == "bob"
    assert friends[0]["pair_id"] == pair_id

    assert client.get(f"/api/diaries/{pair_id}", headers=bob).json() == {
        "success": True,
        "data": {"diaries": []},
    }

    r = client.post(f"/api/diaries/{pair_id}", json={"title": "Day 1", "content": "<p>hi</p>"}, headers=alice)
    assert r.status_code == 200
    assert r.json()["data"]["author_username"] == "alice"

    diaries = client.get(f"/api/diaries/{pair_id}", headers=bob).json()["data"]["diaries"]
    assert [(d["title"], d["author_username"]) for d in diaries] == [("Day 1", "alice")]

    detail = client.get(f"/api/pairs/{pair_id}", headers=bob).json()["data"]
    assert detail["status"] == "paired"
    assert detail["partner_username"] == "alice"
    assert detail["invite_code"] is None


def test_invite_code_flow(client):
    register(client, "alice")
    register(client, "bob")
    register(client, "carol")
    alice = login(client, "alice")
    bob = login(client, "bob")
    carol = login(client, "carol")

    created = client.post("/api/pairs/create", headers=alice).json()["data"]
    pending = client.get(f"/api/pairs/{created['pair_id']}", headers=alice).json()["data"]
    assert pending["status"] == "pending"
    assert pending["invite_code"] == created["invite_code"]

    r = client.post("/api/pairs/join", json={"invite_code": created["invite_code"].lower()}, headers=bob)
    assert r.status_code == 200
    assert r.json()["data"]["pair_id"] == created["pair_id"]

    r = client.post("/api/pairs/join", json={"invite_code": created["invite_code"]}, headers=carol)
    assert r.status_code == 409
    r = client.get(f"/api/pairs/{created['pair_id']}", headers=carol)
    assert r.status_code == 403
    r = client.post("/api/pairs/join", json={"invite_code": "NOPE0000"}, headers=carol)
    assert r.status_code == 404


def test_delete_pair(client):
    register(client, "alice")
    register(client, "bob")
    alice = login(client, "alice")
    bob = login(client, "bob")

    created = client.post("/api/pairs/create", headers=alice).json()["data"]
    client.post("/api/pairs/join", json={"invite_code": created["invite_code"]}, headers=bob)
    client.post(f"/api/diaries/{created['pair_id']}", json={"title": "gone soon"}, headers=alice)

    r = client.delete(f"/api/pairs/{created['pair_id']}", headers=bob)
    assert r.json()["success"] is True
    assert client.get(f"/api/pairs/{created['pair_id']}", headers=alice).status_code == 404

    r = client.delete(f"/api/pairs/{_solo_pair_id(client, alice)}", headers=alice)
    assert r.status_code == 400


def test_drafts_and_calendar(client):
    register(client, "alice")
    register(client, "bob")
    alice = login(client, "alice")
    bob = login(client, "bob")
    created = client.post("/api/pairs/create", headers=alice).json()["data"]
    pair_id = created["pair_id"]
    client.post("/api/pairs/join", json={"invite_code": created["invite_code"]}, headers=bob)

    draft = client.post(
        f"/api/diaries/{pair_id}",
        json={"title": "secret", "is_draft": True, "created_at": "2024-05-10T09:00:00Z"},
        headers=alice,
    ).json()["data"]
    client.post(
        f"/api/diaries/{pair_id}",
        json={"title": "open", "created_at": "2024-05-02T09:00:00Z"},
        headers=alice,
    )

    drafts = client.get(f"/api/diaries/{pair_id}/drafts", headers=alice).json()["data"]["drafts"]
    assert [d["id"] for d in drafts] == [draft["id"]]
    assert client.get(f"/api/diaries/{pair_id}/drafts", headers=bob).json()["data"]["drafts"] == []
    assert client.get(f"/api/diaries/{pair_id}/{draft['id']}", headers=bob).status_code == 403

    days = client.get(f"/api/diaries/{pair_id}/calendar/2024/5", headers=bob).json()["data"]["days"]
    assert days == [2]

    r = client.put(f"/api/diaries/{pair_id}/{draft['id']}", json={"is_draft": False}, headers=alice)
    assert r.status_code == 200
    assert r.json()["data"]["title"] == "secret"
    assert not r.json()["data"]["is_draft"]

    days = client.get(f"/api/diaries/{pair_id}/calendar/2024/5", headers=bob).json()["data"]["days"]
    assert days == [2, 10]
    assert client.get(f"/api/diaries/{pair_id}/calendar/2024/13", headers=bob).status_code == 400

    r = client.put(f"/api/diaries/{pair_id}/{draft['id']}", json={"title": "mine"}, headers=bob)
    assert r.status_code == 403
    r = client.delete(f"/api/diaries/{pair_id}/{draft['id']}", headers=alice)
    assert r.json()["success"] is True


def test_public_diaries(client):
    alice_data = register(client, "alice")
    register(client, "bob")
    alice = login(client, "alice")
    bob = login(client, "bob")

    published = client.post("/api/public-diaries", json={"title": "Hello world"}, headers=alice).json()["data"]
    draft = client.post("/api/public-diaries", json={"title": "Later", "is_draft": True}, headers=alice).json()["data"]

    page = client.get(f"/api/public-diaries/{alice_data['account_id']}").json()["data"]
    assert page["user"]["username"] == "alice"
    assert [d["id"] for d in page["diaries"]] == [published["id"]]

    r = client.get(f"/api/public-diaries/{alice_data['account_id']}/{published['id']}")
    assert r.status_code == 200
    assert r.json()["data"]["author_username"] == "alice"
    assert client.get(f"/api/public-diaries/{alice_data['account_id']}/{draft['id']}").status_code == 403
    r = client.get(f"/api/public-diaries/{alice_data['account_id']}/{draft['id']}", headers=alice)
    assert r.status_code == 200

    own = client.get("/api/public-diaries", headers=alice).json()["data"]["diaries"]
    assert {d["id"] for d in own} == {published["id"], draft["id"]}

    assert client.put(f"/api/public-diaries/{published['id']}", json={"title": "x"}, headers=bob).status_code == 403
    assert client.delete(f"/api/public-diaries/{published['id']}", headers=alice).status_code == 200
    assert client.get("/api/public-diaries/nobody00").status_code == 404


# --- Auth and sessions ---

def test_requests_without_session_are_rejected(client):
    r = client.get("/api/pairs")
    assert r.status_code == 401
    assert r.json() == {"success": False, "error": "Login required"}

    r = client.get("/api/auth/me", headers={"X-Session-ID": "not-a-real-token"})
    assert r.status_code == 401
    assert r.json()["success"] is False


def test_cookie_session(client):
    register(client, "alice")
    r = client.post("/api/auth/login", json={"username": "alice", "password": "password123"})
    assert r.status_code == 200
    assert "session_id" in r.cookies

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["data"]["username"] == "alice"


def test_logout_invalidates_token(client):
    register(client, "alice")
    headers = login(client, "alice")
    assert client.get("/api/auth/me", headers=headers).status_code == 200

    assert client.post("/api/auth/logout", headers=headers).json()["success"] is True
    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_logout_all(client):
    register(client, "alice")
    first = login(client, "alice")
    second = login(client, "alice")

    r = client.post("/api/auth/logout-all", headers=first)
    assert r.json()["data"]["sessions_closed"] == 2
    assert client.get("/api/auth/me", headers=second).status_code == 401


def test_login_failure_is_generic(client):
    register(client, "alice")
    wrong = client.post("/api/auth/login", json={"username": "alice", "password": "wrong-password"})
    unknown = client.post("/api/auth/login", json={"username": "nobody", "password": "wrong-password"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json()


def test_password_length_limit(client):
    long_password = "p" * 72
    register(client, "alice", long_password)
    login(client, "alice", long_password)

    r = client.post("/api/auth/register", json={"username": "bob", "password": "x" * 80})
    assert r.status_code == 400
    assert r.json()["success"] is False

    wrong = client.post("/api/auth/login", json={"username": "alice", "password": "wrong-password"})
    too_long = client.post("/api/auth/login", json={"username": "alice", "password": long_password + "y" * 8})
    assert too_long.status_code == 401
    assert too_long.json() == wrong.json()


def test_register_errors(client):
    register(client, "alice")
    r = client.post("/api/auth/register", json={"username": "alice", "password": "password123"})
    assert r.status_code == 409
    assert r.json()["success"] is False

    r = client.post("/api/auth/register", json={"username": "dave", "password": "short"})
    assert r.status_code == 400

    r = client.post("/api/auth/register", json={"username": "dave"})
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_unexpected_failure_returns_generic_error(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("database exploded at /var/lib/secret.db")

    monkeypatch.setattr(identity_service, "register", boom)
    with TestClient(app, raise_server_exceptions=False) as c:
        r = c.post("/api/auth/register", json={"username": "alice", "password": "password123"})
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Internal server error"}
