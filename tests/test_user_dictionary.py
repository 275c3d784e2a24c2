import pytest


@pytest.fixture
def definition_id(add_word):
    return add_word()["definition_id"]


def add_entry(client, headers, definition_id):
    return client.post("/user-dictionary", json={"definition_id": definition_id}, headers=headers)


def test_add_entry_uses_user_languages(client, auth_headers, definition_id, user):
    res = add_entry(client, auth_headers, definition_id)
    assert res.status_code == 201
    body = res.json()
    assert body["user_id"] == user.id
    assert body["definition_id"] == definition_id
    assert body["base_language_code"] == "en"
    assert body["target_language_code"] == "da"
    assert body["learning_status"] == "notStarted"
    assert body["is_favorite"] is False


def test_adding_twice_returns_existing_entry(client, auth_headers, definition_id):
    first = add_entry(client, auth_headers, definition_id).json()
    second = add_entry(client, auth_headers, definition_id)
    assert second.status_code == 200
    assert second.json()["id"] == first["id"]


def test_removed_entry_is_restored(client, auth_headers, definition_id):
    entry_id = add_entry(client, auth_headers, definition_id).json()["id"]
    assert client.delete(f"/user-dictionary/{entry_id}", headers=auth_headers).status_code == 204
    assert client.get(f"/user-dictionary/{entry_id}", headers=auth_headers).status_code == 404

    res = add_entry(client, auth_headers, definition_id)
    assert res.status_code == 201
    assert res.json()["id"] == entry_id


def test_add_unknown_definition(client, auth_headers):
    res = add_entry(client, auth_headers, 9999)
    assert res.status_code == 404
    assert res.json()["detail"] == "Definition not found"


def test_status_transitions_set_timestamps(client, auth_headers, definition_id):
    entry_id = add_entry(client, auth_headers, definition_id).json()["id"]

    res = client.patch(
        f"/user-dictionary/{entry_id}/status",
        json={"learning_status": "inProgress", "progress": 30},
        headers=auth_headers,
    )
    body = res.json()
    assert body["learning_status"] == "inProgress"
    assert body["time_word_was_started_to_learn"] is not None
    assert body["time_word_was_learned"] is None
    assert body["review_count"] == 1
    assert body["progress"] == 30
    started = body["time_word_was_started_to_learn"]

    res = client.patch(
        f"/user-dictionary/{entry_id}/status",
        json={"learning_status": "learned", "mastery_score": 95},
        headers=auth_headers,
    )
    body = res.json()
    assert body["learning_status"] == "learned"
    assert body["time_word_was_learned"] is not None
    assert body["time_word_was_started_to_learn"] == started
    assert body["review_count"] == 2
    assert body["mastery_score"] == 95


def test_invalid_status(client, auth_headers, definition_id):
    entry_id = add_entry(client, auth_headers, definition_id).json()["id"]
    res = client.patch(f"/user-dictionary/{entry_id}/status", json={"learning_status": "forgotten"}, headers=auth_headers)
    assert res.status_code == 400


def test_toggle_favorite(client, auth_headers, definition_id):
    entry_id = add_entry(client, auth_headers, definition_id).json()["id"]
    assert client.post(f"/user-dictionary/{entry_id}/favorite", headers=auth_headers).json()["is_favorite"] is True
    assert client.post(f"/user-dictionary/{entry_id}/favorite", headers=auth_headers).json()["is_favorite"] is False


def test_custom_data_marks_entry_modified(client, auth_headers, definition_id):
    entry_id = add_entry(client, auth_headers, definition_id).json()["id"]
    res = client.patch(
        f"/user-dictionary/{entry_id}/custom",
        json={"custom_notes": "remember the soft d", "custom_tags": ["animals"]},
        headers=auth_headers,
    )
    body = res.json()
    assert body["is_modified"] is True
    assert body["custom_notes"] == "remember the soft d"
    assert body["custom_tags"] == ["animals"]


def test_entries_of_other_users_are_hidden(client, auth_headers, other_user, add_word):
    foreign = add_word(word="kat", definition="a cat", owner=other_user)["user_dictionary_id"]
    assert client.get(f"/user-dictionary/{foreign}", headers=auth_headers).status_code == 404
    assert client.post(f"/user-dictionary/{foreign}/favorite", headers=auth_headers).status_code == 404
    assert client.delete(f"/user-dictionary/{foreign}", headers=auth_headers).status_code == 404


def test_list_filters(client, auth_headers, add_word):
    first = add_entry(client, auth_headers, add_word()["definition_id"]).json()["id"]
    add_entry(client, auth_headers, add_word(word="kat", definition="a cat")["definition_id"])
    client.post(f"/user-dictionary/{first}/favorite", headers=auth_headers)

    body = client.get("/user-dictionary", headers=auth_headers).json()
    assert body["total"] == 2

    favorites = client.get("/user-dictionary", params={"favorites": True}, headers=auth_headers).json()
    assert [e["id"] for e in favorites["entries"]] == [first]

    not_started = client.get(
        "/user-dictionary", params={"learning_status": "notStarted"}, headers=auth_headers
    ).json()
    assert not_started["total"] == 2


def test_stats(client, auth_headers, add_word):
    a = add_entry(client, auth_headers, add_word()["definition_id"]).json()["id"]
    b = add_entry(client, auth_headers, add_word(word="kat", definition="a cat")["definition_id"]).json()["id"]
    client.post(f"/user-dictionary/{a}/favorite", headers=auth_headers)
    client.patch(
        f"/user-dictionary/{a}/status",
        json={"learning_status": "needsReview", "mastery_score": 40},
        headers=auth_headers,
    )
    client.patch(
        f"/user-dictionary/{b}/status",
        json={"learning_status": "learned", "mastery_score": 90},
        headers=auth_headers,
    )

    body = client.get("/user-dictionary/stats", headers=auth_headers).json()
    assert body["total_words"] == 2
    assert body["favorites"] == 1
    assert body["needs_review"] == 1
    assert body["average_mastery"] == 65
    assert body["by_status"]["learned"] == 1
    assert body["by_status"]["needsReview"] == 1
    assert body["by_status"]["notStarted"] == 0
