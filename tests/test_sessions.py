"""Tests for chat session and message CRUD."""


def make_session(client, headers, title=None):
    body = {} if title is None else {"title": title}
    response = client.post("/api/sessions", json=body, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def add_message(client, headers, session_id, content, role="user"):
    response = client.post(
        "/api/messages",
        json={"session_id": session_id, "role": role, "content": content},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()


def test_sessions_require_auth(client):
    assert client.get("/api/sessions").status_code == 401


def test_create_session_with_default_title(client, auth_headers):
    session = make_session(client, auth_headers)
    assert session["title"] == "New Chat"
    assert session["messages"] == []


def test_list_sessions_newest_first_with_ordered_messages(client, auth_headers):
    first = make_session(client, auth_headers, "first")
    second = make_session(client, auth_headers, "second")
    add_message(client, auth_headers, first["id"], "one")
    add_message(client, auth_headers, first["id"], "two", role="assistant")

    sessions = client.get("/api/sessions", headers=auth_headers).json()
    assert [s["id"] for s in sessions] == [second["id"], first["id"]]
    assert [m["content"] for m in sessions[1]["messages"]] == ["one", "two"]


def test_sessions_are_private(client, auth_headers, other_headers):
    mine = make_session(client, auth_headers, "mine")
    assert client.get("/api/sessions", headers=other_headers).json() == []
    assert client.get(f"/api/messages/{mine['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/sessions/{mine['id']}", headers=other_headers).status_code == 404
    foreign = client.post(
        "/api/messages",
        json={"session_id": mine["id"], "role": "user", "content": "sneaky"},
        headers=other_headers,
    )
    assert foreign.status_code == 404


def test_rename_session(client, auth_headers):
    session = make_session(client, auth_headers)
    response = client.patch(f"/api/sessions/{session['id']}", json={"title": "Termux tips"}, headers=auth_headers)
    assert response.status_code == 204
    assert client.get("/api/sessions", headers=auth_headers).json()[0]["title"] == "Termux tips"


def test_delete_session(client, auth_headers):
    session = make_session(client, auth_headers)
    add_message(client, auth_headers, session["id"], "bye")
    assert client.delete(f"/api/sessions/{session['id']}", headers=auth_headers).status_code == 204
    assert client.get("/api/sessions", headers=auth_headers).json() == []
    assert client.get(f"/api/messages/{session['id']}", headers=auth_headers).status_code == 404


def test_messages_roundtrip_and_clear(client, auth_headers):
    session = make_session(client, auth_headers)
    created = add_message(client, auth_headers, session["id"], "look", role="model")
    assert created["role"] == "model"
    image = client.post(
        "/api/messages",
        json={"session_id": session["id"], "role": "user", "content": "pic", "image": "data:image/png;base64,AA=="},
        headers=auth_headers,
    ).json()
    assert image["image"] == "data:image/png;base64,AA=="

    messages = client.get(f"/api/messages/{session['id']}", headers=auth_headers).json()
    assert [m["content"] for m in messages] == ["look", "pic"]

    assert client.delete(f"/api/messages/{session['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/messages/{session['id']}", headers=auth_headers).json() == []
    # the session itself survives
    assert len(client.get("/api/sessions", headers=auth_headers).json()) == 1


def test_invalid_message_role(client, auth_headers):
    session = make_session(client, auth_headers)
    response = client.post(
        "/api/messages",
        json={"session_id": session["id"], "role": "robot", "content": "beep"},
        headers=auth_headers,
    )
    assert response.status_code == 422
