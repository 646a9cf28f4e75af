from .conftest import OTHER_USER_ID


SETTING = {
    "fork_compression": 12,
    "fork_rebound": 10,
    "shock_high_speed_compression": 2,
    "shock_low_speed_compression": 14,
    "shock_rebound": 11,
    "sag": 105,
    "notes": "Softer for the sand track",
}


def test_suspension_create_and_list_newest_first(client):
    first = client.post("/suspension", json=SETTING).json()
    second = client.post("/suspension", json={**SETTING, "fork_rebound": 8, "notes": ""}).json()

    settings = client.get("/suspension").json()

    assert [s["id"] for s in settings] == [second["id"], first["id"]]
    assert settings[1]["sag"] == 105
    assert settings[1]["notes"] == "Softer for the sand track"


def test_suspension_fields_are_optional(client):
    response = client.post("/suspension", json={})

    assert response.status_code == 201
    assert response.json()["fork_compression"] is None
    assert response.json()["notes"] == ""


def test_suspension_update_replaces_values(client):
    created = client.post("/suspension", json=SETTING).json()

    response = client.put(f"/suspension/{created['id']}", json={"fork_compression": 14, "notes": "Stiffer"})

    assert response.status_code == 200
    assert response.json()["fork_compression"] == 14
    assert response.json()["shock_rebound"] is None


def test_suspension_rejects_non_numeric_clicks(client):
    assert client.post("/suspension", json={"fork_compression": "lots"}).status_code == 422


def test_suspension_update_and_delete_are_scoped(client, fake_db):
    foreign = fake_db.seed("suspension_settings", user_id=OTHER_USER_ID, notes="")

    assert client.put(f"/suspension/{foreign['id']}", json=SETTING).status_code == 404
    assert client.delete(f"/suspension/{foreign['id']}").status_code == 404


def test_suspension_delete(client, fake_db):
    created = client.post("/suspension", json=SETTING).json()

    assert client.delete(f"/suspension/{created['id']}").status_code == 204
    assert fake_db.tables["suspension_settings"] == []


def test_notes_crud(client):
    created = client.post("/notes", json={"content": "Brake later into turn 3"})
    assert created.status_code == 201
    note = created.json()

    client.post("/notes", json={"content": "Stand up through the whoops"})
    assert [n["content"] for n in client.get("/notes").json()] == [
        "Stand up through the whoops",
        "Brake later into turn 3",
    ]

    updated = client.put(f"/notes/{note['id']}", json={"content": "Brake later into turn 4"})
    assert updated.json()["content"] == "Brake later into turn 4"

    assert client.delete(f"/notes/{note['id']}").status_code == 204
    assert len(client.get("/notes").json()) == 1


def test_blank_note_is_rejected(client):
    response = client.post("/notes", json={"content": "   "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Note content is required"


def test_notes_of_other_users_are_hidden(client, fake_db):
    fake_db.seed("notes", user_id=OTHER_USER_ID, content="not yours")

    assert client.get("/notes").json() == []
