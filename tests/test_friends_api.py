from unittest.mock import MagicMock

from app.common.deps import get_friendship_service
from app.core.exceptions import StoreFailure
from app.main import app

BASE = "/api/v1/friends"


def login(acting, user):
    acting["id"] = user.id


def test_request_accept_and_list(client, acting, users):
    alice, bob = users["alice"], users["bob"]

    login(acting, alice)
    resp = client.post(f"{BASE}/request", json={"receiverId": bob.id})
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["status"] == "pending"
    assert body["data"]["sender_id"] == alice.id

    login(acting, bob)
    resp = client.post(f"{BASE}/accept", json={"senderId": alice.id})
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "accepted"

    login(acting, alice)
    resp = client.get(f"{BASE}/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 1
    friend = body["friends"][0]
    assert friend == {"id": bob.id, "full_name": "Bob Jones", "email": "bob@example.com", "avatar": ""}
    assert "hashed_password" not in friend
    assert "refresh_token" not in friend

    resp = client.post(f"{BASE}/status", json={"friendId": bob.id})
    assert resp.json() == {"success": True, "status": "accepted"}


def test_duplicate_request_reports_status(client, acting, users):
    alice, bob = users["alice"], users["bob"]
    login(acting, alice)
    client.post(f"{BASE}/request", json={"receiverId": bob.id})

    login(acting, bob)
    resp = client.post(f"{BASE}/request", json={"receiverId": alice.id})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["status"] == "pending"
    assert body["message"] == "Friend request already exists with status: pending"


def test_missing_and_self_targets_are_bad_requests(client, acting, users):
    alice = users["alice"]
    login(acting, alice)

    resp = client.post(f"{BASE}/request", json={})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Receiver ID is required"

    resp = client.post(f"{BASE}/request", json={"receiverId": alice.id})
    assert resp.status_code == 400

    assert client.post(f"{BASE}/accept").status_code == 400
    assert client.post(f"{BASE}/status", json={}).status_code == 400
    assert client.request("DELETE", f"{BASE}/remove", json={}).status_code == 400


def test_cancel_and_remove(client, acting, users):
    alice, bob = users["alice"], users["bob"]
    login(acting, alice)
    client.post(f"{BASE}/request", json={"receiverId": bob.id})

    resp = client.request("DELETE", f"{BASE}/remove", json={"friendId": bob.id})
    assert resp.status_code == 404

    resp = client.request("DELETE", f"{BASE}/request", json={"receiverId": bob.id})
    assert resp.status_code == 200
    assert resp.json()["message"] == "Friend request canceled successfully"

    resp = client.request("DELETE", f"{BASE}/request", json={"receiverId": bob.id})
    assert resp.status_code == 404
    assert resp.json()["success"] is False

    resp = client.post(f"{BASE}/status", json={"friendId": bob.id})
    assert resp.status_code == 404


def test_search(client, acting, users):
    alice = users["alice"]
    for key in ("bob", "carol"):
        login(acting, alice)
        client.post(f"{BASE}/request", json={"receiverId": users[key].id})
        login(acting, users[key])
        client.post(f"{BASE}/accept", json={"senderId": alice.id})

    login(acting, alice)
    resp = client.get(f"{BASE}/search", params={"query": "JO"})
    assert resp.status_code == 200
    assert [f["id"] for f in resp.json()["friends"]] == [users["bob"].id]

    resp = client.get(f"{BASE}/search", params={"query": "  "})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Search query is required"
    assert client.get(f"{BASE}/search").status_code == 400


def test_store_failure_is_generic_500(client, acting, users):
    failing = MagicMock()
    failing.list_friends.side_effect = StoreFailure("database is down")
    app.dependency_overrides[get_friendship_service] = lambda: failing

    login(acting, users["alice"])
    resp = client.get(f"{BASE}/")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Internal server error"}


def test_malformed_ids_use_the_error_envelope(client, acting, users):
    login(acting, users["alice"])

    resp = client.post(f"{BASE}/request", json={"receiverId": "abc"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Invalid value for receiverId"

    resp = client.post(f"{BASE}/accept", json={"senderId": "abc"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid value for senderId"

    resp = client.post(f"{BASE}/status", json={"friendId": [1]})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
