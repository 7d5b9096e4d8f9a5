"""
Security tests for Interception attack prevention.

These tests ensure that:
1. Users cannot read other users' notes
2. Users cannot modify other users' notes
3. Users cannot delete other users' notes
4. Foreign notes look exactly like missing ones (404, never 403)
5. Requests without a usable identity are rejected
"""

from conftest import as_user, create_note


def test_unauthorized_note_access(client):
    """
    Abuse Frame: Interception.
    Ensures User A cannot intercept User B's notes.
    """
    note_id = create_note(client, "userB", "Private Note", "Secret content")["id"]

    response = client.get(f"/notes/{note_id}", headers=as_user("userA"))
    assert response.status_code == 404  # Vulnerability prevented


def test_unauthorized_note_modification(client):
    """
    Abuse Frame: Interception/Tampering.
    Ensures User A cannot modify User B's notes.
    """
    note_id = create_note(client, "userB", "Original Title", "Original content")["id"]

    response = client.patch(
        f"/notes/{note_id}",
        headers=as_user("userA"),
        json={"title": "Hacked Title", "content": "Hacked content"},
    )
    assert response.status_code == 404

    # Verify the note was not modified
    r = client.get(f"/notes/{note_id}", headers=as_user("userB"))
    assert r.status_code == 200
    assert r.json()["title"] == "Original Title"
    assert r.json()["content"] == "Original content"


def test_foreign_note_with_invalid_payload_is_still_not_found(client):
    """
    The ownership check runs before validation, so a bad payload against a
    foreign note cannot be used to detect its existence.
    """
    note_id = create_note(client, "userB")["id"]

    response = client.patch(f"/notes/{note_id}", headers=as_user("userA"), json={"title": ""})
    assert response.status_code == 404


def test_unauthorized_note_deletion(client):
    note_id = create_note(client, "userB", "Keep me", "please")["id"]

    response = client.delete(f"/notes/{note_id}", headers=as_user("userA"))
    assert response.status_code == 404

    r = client.get(f"/notes/{note_id}", headers=as_user("userB"))
    assert r.status_code == 200


def test_foreign_and_missing_notes_are_indistinguishable(client):
    note_id = create_note(client, "userB")["id"]
    missing = "00000000-0000-0000-0000-000000000000"

    foreign = client.get(f"/notes/{note_id}", headers=as_user("userA"))
    absent = client.get(f"/notes/{missing}", headers=as_user("userA"))
    assert foreign.status_code == absent.status_code == 404
    assert foreign.json() == absent.json()


def test_missing_user_id_header(client):
    """
    Abuse Frame: Interception - Missing Authentication.
    Ensures requests without any identity are rejected.
    """
    note_id = create_note(client, "userB", "Secure Note", "Protected")["id"]

    response = client.get(f"/notes/{note_id}")
    assert response.status_code == 401

    response = client.post("/notes", json={"title": "x", "content": "y"})
    assert response.status_code == 401


def test_unauthenticated_invalid_payload_is_unauthorized_first(client):
    response = client.post("/notes", json={"title": ""})
    assert response.status_code == 401


def test_unauthenticated_malformed_body_is_unauthorized_first(client):
    """
    Identity is resolved before the body is read, so an anonymous caller
    learns nothing from how its body is parsed.
    """
    headers = {"Content-Type": "application/json"}
    note_id = create_note(client, "userB")["id"]

    assert client.post("/notes", headers=headers, content=b'{"title": ').status_code == 401
    assert client.patch(f"/notes/{note_id}", headers=headers, content=b"{").status_code == 401


def test_tampering_with_user_id_header(client):
    """
    Abuse Frame: Interception - Header Tampering.
    Ensures a mangled identity header is not an identity at all.
    """
    note_id = create_note(client, "userB", "Secret", "Only for B")["id"]

    response = client.get(f"/notes/{note_id}", headers=as_user("userA; userB"))
    assert response.status_code == 401

    response = client.get(f"/notes/{note_id}", headers=as_user("../userB"))
    assert response.status_code == 401

    response = client.get(f"/notes/{note_id}", headers=as_user("userB"))
    assert response.status_code == 200


def test_note_list_isolation(client):
    """
    Abuse Frame: Interception - Information Disclosure.
    Ensures User A cannot see User B's notes in the list or in search.
    """
    b_ids = [create_note(client, "userB", f"Note {i}", f"Content {i}")["id"] for i in range(3)]
    a_note_id = create_note(client, "userA", "User A Note", "A's content")["id"]

    r = client.get("/notes", headers=as_user("userA"))
    assert r.status_code == 200
    a_ids = [n["id"] for n in r.json()]
    assert a_ids == [a_note_id]
    for note_id in b_ids:
        assert note_id not in a_ids

    r = client.get("/notes", headers=as_user("userA"), params={"search": "Note 1"})
    assert r.status_code == 200
    assert r.json() == []
