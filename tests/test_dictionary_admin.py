import pytest

from dictionary_backend.app.models import (
    Audio,
    Definition,
    DefinitionExample,
    UserDictionary,
    Word,
    WordDetails,
)
from dictionary_backend.app.schemas.dictionary import WordEntryCreate
from dictionary_backend.app.services import dictionary_service

WORD_ENTRY = {
    "word": "hus",
    "language_code": "da",
    "part_of_speech": "noun",
    "definition": "a building for people to live in",
    "definition_language_code": "en",
    "phonetic": "hu:s",
    "gender": "neuter",
    "examples": [{"example": "Huset er rødt."}, {"example": "Et stort hus."}],
}


def test_add_word_entry(client, auth_headers, db_session):
    res = client.post("/dictionary/words", json=WORD_ENTRY, headers=auth_headers)
    assert res.status_code == 201
    body = res.json()
    assert len(body["example_ids"]) == 2
    assert body["user_dictionary_id"] is None

    definition = db_session.get(Definition, body["definition_id"])
    assert definition.language_code.value == "en"
    assert [e.example for e in definition.examples] == ["Huset er rødt.", "Et stort hus."]
    assert all(e.language_code.value == "da" for e in definition.examples)


def test_add_word_entry_into_own_dictionary(client, auth_headers, db_session, user):
    res = client.post("/dictionary/words", json=dict(WORD_ENTRY, add_to_user_dictionary=True), headers=auth_headers)
    entry = db_session.get(UserDictionary, res.json()["user_dictionary_id"])
    assert entry.user_id == user.id
    assert entry.time_word_was_started_to_learn is not None


def test_same_word_is_reused(client, auth_headers, db_session):
    first = client.post("/dictionary/words", json=WORD_ENTRY, headers=auth_headers).json()
    second = client.post(
        "/dictionary/words",
        json=dict(WORD_ENTRY, definition="a household", examples=[]),
        headers=auth_headers,
    ).json()
    assert first["word_id"] == second["word_id"]
    assert first["definition_id"] != second["definition_id"]
    assert db_session.query(Word).count() == 1
    assert db_session.query(WordDetails).count() == 2


def test_add_word_entry_validation(client, auth_headers):
    res = client.post("/dictionary/words", json=dict(WORD_ENTRY, part_of_speech="thing"), headers=auth_headers)
    assert res.status_code == 400
    res = client.post("/dictionary/words", json={"word": "hus"}, headers=auth_headers)
    assert res.status_code == 400


def test_add_word_entry_rolls_back_on_failure(db_session, monkeypatch):
    def broken_link(**kwargs):
        raise RuntimeError("link table unavailable")

    monkeypatch.setattr(dictionary_service, "WordDefinition", broken_link)
    with pytest.raises(RuntimeError):
        dictionary_service.add_word_entry(db_session, WordEntryCreate(**WORD_ENTRY))

    assert db_session.query(Word).count() == 0
    assert db_session.query(Definition).count() == 0
    assert db_session.query(DefinitionExample).count() == 0


def test_admin_routes_require_admin(client, auth_headers):
    assert client.get("/admin/dictionary", headers=auth_headers).status_code == 403
    assert client.get("/admin/categories", headers=auth_headers).status_code == 403
    assert client.get("/admin/dictionary").status_code == 401


def test_list_and_filter_words(client, admin_headers, add_word):
    add_word(word="hund")
    add_word(word="hurtig", definition="fast", part_of_speech="adjective")
    add_word(word="house", definition="a building", language_code="en")

    body = client.get("/admin/dictionary", headers=admin_headers).json()
    assert body["total"] == 3
    assert [w["word"] for w in body["words"]] == ["house", "hund", "hurtig"]

    body = client.get("/admin/dictionary", params={"language_code": "da"}, headers=admin_headers).json()
    assert body["total"] == 2

    body = client.get("/admin/dictionary", params={"part_of_speech": "adjective"}, headers=admin_headers).json()
    assert [w["word"] for w in body["words"]] == ["hurtig"]

    body = client.get("/admin/dictionary", params={"search": "HUN"}, headers=admin_headers).json()
    assert [w["word"] for w in body["words"]] == ["hund"]


def test_word_details_and_update(client, admin_headers, add_word):
    ids = add_word(examples=["Hunden gør."])
    res = client.get(f"/admin/dictionary/words/{ids['word_id']}", headers=admin_headers)
    assert res.status_code == 200
    word = res.json()
    assert word["word"] == "hund"
    definition = word["details"][0]["definitions"][0]
    assert definition["definition"] == "a dog"
    assert definition["is_primary"] is True
    assert definition["examples"][0]["example"] == "Hunden gør."

    res = client.put(
        f"/admin/dictionary/words/{ids['word_id']}",
        json={"is_highlighted": True, "phonetic_general": "hun"},
        headers=admin_headers,
    )
    assert res.json()["is_highlighted"] is True
    assert res.json()["phonetic_general"] == "hun"

    assert client.get("/admin/dictionary/words/9999", headers=admin_headers).status_code == 404


def test_delete_word_removes_orphan_definitions(client, admin_headers, add_word, db_session, user):
    ids = add_word(examples=["Hunden gør."], owner=user)
    res = client.delete(f"/admin/dictionary/words/{ids['word_id']}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json() == {"deleted": True, "definitions_removed": 1}

    db_session.expire_all()
    assert db_session.query(Word).count() == 0
    assert db_session.query(Definition).count() == 0
    assert db_session.query(DefinitionExample).count() == 0
    assert db_session.query(UserDictionary).count() == 0


def test_definition_and_examples(client, admin_headers, add_word):
    ids = add_word()
    res = client.put(
        f"/admin/dictionary/definitions/{ids['definition_id']}",
        json={"definition": "a domestic dog", "usage_note": "informal"},
        headers=admin_headers,
    )
    assert res.json()["definition"] == "a domestic dog"

    res = client.post(
        f"/admin/dictionary/definitions/{ids['definition_id']}/examples",
        json={"example": "En sød hund."},
        headers=admin_headers,
    )
    assert res.status_code == 201
    example_id = res.json()["id"]

    assert client.delete(f"/admin/dictionary/examples/{example_id}", headers=admin_headers).status_code == 204
    assert client.delete(f"/admin/dictionary/examples/{example_id}", headers=admin_headers).status_code == 404

    res = client.put("/admin/dictionary/definitions/9999", json={"definition": "x"}, headers=admin_headers)
    assert res.status_code == 404


def test_attach_and_detach_audio(client, admin_headers, add_word, db_session):
    details_id = add_word()["word_details_id"]
    first = client.post(
        f"/admin/dictionary/word-details/{details_id}/audio",
        json={"url": "https://cdn.test/hund-1.mp3", "language_code": "da", "is_primary": True},
        headers=admin_headers,
    ).json()
    second = client.post(
        f"/admin/dictionary/word-details/{details_id}/audio",
        json={"url": "https://cdn.test/hund-2.mp3", "language_code": "da", "is_primary": True},
        headers=admin_headers,
    ).json()

    details = db_session.get(WordDetails, details_id)
    db_session.refresh(details)
    primary = {link.audio_id: link.is_primary for link in details.audio_links}
    assert primary == {first["id"]: False, second["id"]: True}

    res = client.delete(f"/admin/dictionary/word-details/{details_id}/audio/{first['id']}", headers=admin_headers)
    assert res.status_code == 204
    # 只解除关联，audio 行留给清理任务
    assert db_session.get(Audio, first["id"]) is not None

    res = client.delete(f"/admin/dictionary/word-details/{details_id}/audio/{first['id']}", headers=admin_headers)
    assert res.status_code == 404


def test_categories(client, admin_headers):
    res = client.post("/admin/categories", json={"name": "Food"}, headers=admin_headers)
    assert res.status_code == 201
    client.post("/admin/categories", json={"name": "Animals"}, headers=admin_headers)
    names = [c["name"] for c in client.get("/admin/categories", headers=admin_headers).json()]
    assert names == ["Animals", "Food"]


def test_duplicate_category_conflicts(client, admin_headers):
    client.post("/admin/categories", json={"name": "Food"}, headers=admin_headers)
    res = client.post("/admin/categories", json={"name": "Food"}, headers=admin_headers)
    assert res.status_code == 409
    assert res.json()["code"] == "UNIQUE_CONSTRAINT_VIOLATION"
    assert res.json()["status"] == 409


def _create_list(client, headers, category_id, **extra):
    payload = {
        "name": "Starter words",
        "category_id": category_id,
        "base_language_code": "en",
        "target_language_code": "da",
        "is_public": True,
    }
    payload.update(extra)
    return client.post("/admin/lists", json=payload, headers=headers)


def test_list_word_count_follows_words(client, admin_headers, add_word):
    category_id = client.post("/admin/categories", json={"name": "Basics"}, headers=admin_headers).json()["id"]
    a = add_word()["definition_id"]
    b = add_word(word="kat", definition="a cat")["definition_id"]

    res = _create_list(client, admin_headers, category_id, definition_ids=[a, a])
    assert res.status_code == 201
    vocab_list = res.json()
    assert vocab_list["word_count"] == 1
    assert vocab_list["difficulty_level"] == "beginner"

    res = client.post(f"/admin/lists/{vocab_list['id']}/words", json={"definition_ids": [a, b]}, headers=admin_headers)
    assert res.json() == {"added": 1, "word_count": 2}


def test_list_with_unknown_category(client, admin_headers):
    res = _create_list(client, admin_headers, 999)
    assert res.status_code == 400
    assert res.json()["code"] == "FOREIGN_KEY_VIOLATION"


def test_list_soft_delete_and_restore(client, admin_headers):
    category_id = client.post("/admin/categories", json={"name": "Basics"}, headers=admin_headers).json()["id"]
    list_id = _create_list(client, admin_headers, category_id).json()["id"]

    res = client.delete(f"/admin/lists/{list_id}", headers=admin_headers)
    assert res.json()["deleted_at"] is not None
    assert client.get("/admin/lists", headers=admin_headers).json() == []
    hidden = client.get("/admin/lists", params={"include_deleted": True}, headers=admin_headers).json()
    assert [l["id"] for l in hidden] == [list_id]

    res = client.post(f"/admin/lists/{list_id}/restore", headers=admin_headers)
    assert res.json()["deleted_at"] is None
    assert len(client.get("/admin/lists", headers=admin_headers).json()) == 1


def test_list_filters_and_update(client, admin_headers):
    category_id = client.post("/admin/categories", json={"name": "Basics"}, headers=admin_headers).json()["id"]
    list_id = _create_list(client, admin_headers, category_id, description="first steps").json()["id"]
    _create_list(client, admin_headers, category_id, name="Hard words", difficulty_level="advanced", is_public=False)

    found = client.get("/admin/lists", params={"search": "steps"}, headers=admin_headers).json()
    assert [l["id"] for l in found] == [list_id]
    advanced = client.get("/admin/lists", params={"difficulty_level": "advanced"}, headers=admin_headers).json()
    assert [l["name"] for l in advanced] == ["Hard words"]
    public = client.get("/admin/lists", params={"is_public": True}, headers=admin_headers).json()
    assert [l["id"] for l in public] == [list_id]

    res = client.put(f"/admin/lists/{list_id}", json={"name": "Renamed", "tags": ["a1"]}, headers=admin_headers)
    assert res.json()["name"] == "Renamed"
    assert res.json()["tags"] == ["a1"]

    assert client.get("/admin/lists/unknown", headers=admin_headers).status_code == 404
