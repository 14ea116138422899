"""Tests for the admin user-management routes."""

from sqlalchemy import func, select

from tests.conftest import login
from xtermux.database.entities import ChatMessage, ChatSession, GuideProgress, User


def count_rows(db, entity, *criteria):
    return db.scalar(select(func.count()).select_from(entity).where(*criteria))


def test_non_admin_is_denied(client, auth_headers):
    response = client.get("/api/admin/users", headers=auth_headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Access Denied"


def test_list_users_sorted_by_last_update(client, admin_headers, auth_headers, other_headers):
    client.patch("/api/profile", json={"username": "alice-renamed"}, headers=auth_headers)
    users = client.get("/api/admin/users", headers=admin_headers).json()
    assert [u["username"] for u in users][0] == "alice-renamed"
    assert {u["username"] for u in users} == {"alice-renamed", "bob", "root"}


def test_search_users(client, admin_headers, auth_headers, other_headers):
    users = client.get("/api/admin/users", params={"search": "BOB@"}, headers=admin_headers).json()
    assert [u["email"] for u in users] == ["bob@xtermux.dev"]


def test_create_user_defaults_username_to_email_local_part(client, admin_headers):
    response = client.post(
        "/api/admin/users",
        json={"email": "trinity@xtermux.dev", "password": "matrix99", "role": "admin"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["username"] == "trinity"
    assert body["role"] == "admin"

    # the new admin can use the admin routes
    headers = login(client, "trinity@xtermux.dev", "matrix99")
    assert client.get("/api/admin/users", headers=headers).status_code == 200


def test_create_user_rejects_short_username(client, admin_headers):
    response = client.post(
        "/api/admin/users",
        json={"email": "neo@xtermux.dev", "password": "matrix99", "username": "ne"},
        headers=admin_headers,
    )
    assert response.status_code == 422

def test_update_role(client, admin_headers, auth_headers):
    alice = client.get("/api/profile", headers=auth_headers).json()
    response = client.patch(f"/api/admin/users/{alice['id']}/role", json={"role": "admin"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    assert client.get("/api/admin/users", headers=auth_headers).status_code == 200


def test_invalid_role_is_rejected(client, admin_headers, auth_headers):
    alice = client.get("/api/profile", headers=auth_headers).json()
    response = client.patch(f"/api/admin/users/{alice['id']}/role", json={"role": "god"}, headers=admin_headers)
    assert response.status_code == 422


def test_block_and_unblock(client, admin_headers, auth_headers):
    alice = client.get("/api/profile", headers=auth_headers).json()

    blocked = client.post(f"/api/admin/users/{alice['id']}/block", json={"blocked": True}, headers=admin_headers)
    assert blocked.json()["role"] == "blocked"
    assert client.get("/api/profile", headers=auth_headers).status_code == 403
    denied = client.post("/api/auth/login", json={"email": "alice@xtermux.dev", "password": "secret123"})
    assert denied.status_code == 403

    unblocked = client.post(f"/api/admin/users/{alice['id']}/block", json={"blocked": False}, headers=admin_headers)
    assert unblocked.json()["role"] == "user"
    assert client.get("/api/profile", headers=auth_headers).status_code == 200


def test_delete_user_removes_their_data(client, admin_headers, auth_headers):
    alice = client.get("/api/profile", headers=auth_headers).json()
    session = client.post("/api/sessions", json={"title": "doomed"}, headers=auth_headers).json()
    client.post(
        "/api/messages",
        json={"session_id": session["id"], "role": "user", "content": "hi"},
        headers=auth_headers,
    )
    client.post("/api/guides/setup-1/steps/0/toggle", headers=auth_headers)

    db = client.app.state.db.session_factory()
    try:
        assert count_rows(db, ChatMessage, ChatMessage.session_id == session["id"]) == 1
        assert count_rows(db, GuideProgress, GuideProgress.user_id == alice["id"]) == 1
    finally:
        db.close()

    response = client.delete(f"/api/admin/users/{alice['id']}", headers=admin_headers)
    assert response.status_code == 204
    assert client.get("/api/profile", headers=auth_headers).status_code == 401

    db = client.app.state.db.session_factory()
    try:
        assert count_rows(db, User, User.id == alice["id"]) == 0
        assert count_rows(db, ChatSession, ChatSession.user_id == alice["id"]) == 0
        assert count_rows(db, ChatMessage, ChatMessage.session_id == session["id"]) == 0
        assert count_rows(db, GuideProgress, GuideProgress.user_id == alice["id"]) == 0
    finally:
        db.close()


def test_delete_user_keeps_other_users_data(client, admin_headers, auth_headers, other_headers):
    alice = client.get("/api/profile", headers=auth_headers).json()
    bob = client.get("/api/profile", headers=other_headers).json()
    client.post("/api/sessions", json={"title": "kept"}, headers=other_headers)
    client.post("/api/guides/setup-1/steps/0/toggle", headers=other_headers)

    client.delete(f"/api/admin/users/{alice['id']}", headers=admin_headers)

    db = client.app.state.db.session_factory()
    try:
        assert count_rows(db, ChatSession, ChatSession.user_id == bob["id"]) == 1
        assert count_rows(db, GuideProgress, GuideProgress.user_id == bob["id"]) == 1
    finally:
        db.close()


def test_unknown_user_is_404(client, admin_headers):
    response = client.delete("/api/admin/users/does-not-exist", headers=admin_headers)
    assert response.status_code == 404
