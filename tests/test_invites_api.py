from conftest import auth_headers

ALICE = auth_headers("alice", "Alice")
BOB = auth_headers("bob", "Bob")
CAROL = auth_headers("carol", "Carol")


def start(client):
    response = client.post("/api/sessions", json={"topic": "Chores"}, headers=ALICE)
    return response.json()["session"]["id"]


def test_only_initiator_manages_invites(client):
    session_id = start(client)
    invite = client.post(f"/api/sessions/{session_id}/invite", headers=ALICE).json()
    client.post("/api/sessions/join", json={"invite_code": invite["code"]}, headers=BOB)

    assert client.post(f"/api/sessions/{session_id}/invite", headers=BOB).status_code == 403
    assert client.get(f"/api/sessions/{session_id}/invite", headers=BOB).status_code == 403
    assert client.delete(f"/api/sessions/{session_id}/invite", headers=BOB).status_code == 403
    assert client.get(f"/api/sessions/{session_id}/invite", headers=CAROL).status_code == 403


def test_generate_and_read_invite(client):
    session_id = start(client)

    created = client.post(f"/api/sessions/{session_id}/invite", headers=ALICE)
    assert created.status_code == 201
    invite = created.json()
    assert len(invite["code"]) == 8
    assert invite["url"].endswith(f"/dashboard/sessions/join?code={invite['code']}")

    status = client.get(f"/api/sessions/{session_id}/invite", headers=ALICE).json()
    assert status["has_invite"] is True
    assert status["code"] == invite["code"]


def test_revoke_invite(client):
    session_id = start(client)
    invite = client.post(f"/api/sessions/{session_id}/invite", headers=ALICE).json()

    assert client.delete(f"/api/sessions/{session_id}/invite", headers=ALICE).status_code == 204

    status = client.get(f"/api/sessions/{session_id}/invite", headers=ALICE).json()
    assert status == {"has_invite": False, "is_expired": False, "code": None, "url": None, "expires_at": None}
    join = client.post("/api/sessions/join", json={"invite_code": invite["code"]}, headers=BOB)
    assert join.status_code == 400


def test_preview_then_join(client, broadcaster):
    session_id = start(client)
    code = client.post(f"/api/sessions/{session_id}/invite", headers=ALICE).json()["code"]

    preview = client.get("/api/sessions/join", params={"code": code.lower()}, headers=BOB)
    assert preview.status_code == 200
    assert preview.json()["topic"] == "Chores"
    assert preview.json()["initiator_name"] == "Alice"

    joined = client.post("/api/sessions/join", json={"invite_code": code}, headers=BOB)
    assert joined.status_code == 200
    assert joined.json() == {"success": True, "session_id": session_id, "already_joined": False}
    assert broadcaster.of_type("user-joined")[0][2] == {"userId": "bob", "displayName": "Bob"}

    assert client.get(f"/api/sessions/{session_id}/messages", headers=BOB).status_code == 200


def test_preview_unknown_code_is_not_found(client):
    response = client.get("/api/sessions/join", params={"code": "ZZZZ9999"}, headers=BOB)
    assert response.status_code == 404


def test_redeemed_code_stops_working(client):
    session_id = start(client)
    code = client.post(f"/api/sessions/{session_id}/invite", headers=ALICE).json()["code"]
    client.post("/api/sessions/join", json={"invite_code": code}, headers=BOB)

    response = client.post("/api/sessions/join", json={"invite_code": code}, headers=CAROL)

    assert response.status_code == 400
    assert response.json()["error"] == "CONFLICT"
    assert client.get(f"/api/sessions/{session_id}", headers=CAROL).status_code == 403
    participants = client.get(f"/api/sessions/{session_id}/participants", headers=ALICE).json()
    assert participants["count"] == 2


def test_initiator_self_join_rejected(client):
    session_id = start(client)
    code = client.post(f"/api/sessions/{session_id}/invite", headers=ALICE).json()["code"]

    response = client.post("/api/sessions/join", json={"invite_code": code}, headers=ALICE)

    assert response.status_code == 400
    participants = client.get(f"/api/sessions/{session_id}/participants", headers=ALICE).json()
    assert participants["count"] == 1


def test_join_requires_code(client):
    response = client.post("/api/sessions/join", json={"invite_code": ""}, headers=BOB)
    assert response.status_code == 400
