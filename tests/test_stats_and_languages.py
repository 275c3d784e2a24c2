def test_overview_for_new_user(client, auth_headers):
    res = client.get("/stats/overview", headers=auth_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["sessions"]["total_sessions"] == 0
    assert body["dictionary"]["total_words"] == 0
    assert body["today"] == {"words_studied": 0, "daily_goal": 5, "percentage": 0}


def test_overview_tracks_daily_goal(client, auth_headers, user, add_word):
    add_word(owner=user)
    session_id = client.post("/sessions", json={"session_type": "practice"}, headers=auth_headers).json()["id"]
    client.patch(f"/sessions/{session_id}", json={"words_studied": 3}, headers=auth_headers)

    body = client.get("/stats/overview", headers=auth_headers).json()
    assert body["today"] == {"words_studied": 3, "daily_goal": 5, "percentage": 60}
    assert body["dictionary"]["total_words"] == 1
    assert body["sessions"]["streak_days"] == 1

    client.patch(f"/sessions/{session_id}", json={"words_studied": 12}, headers=auth_headers)
    assert client.get("/stats/overview", headers=auth_headers).json()["today"]["percentage"] == 100


def test_languages(client):
    res = client.get("/languages")
    assert res.status_code == 200
    codes = [l["code"] for l in res.json()]
    assert codes[:2] == ["en", "da"]
    assert len(codes) == 12

    assert client.get("/languages/da").json()["native_name"] == "Dansk"
    assert client.get("/languages/xx").status_code == 404


def test_language_words_and_search(client, add_word):
    add_word(word="hund")
    add_word(word="hundehus", definition="a kennel")
    add_word(word="bundt", definition="a bundle")
    add_word(word="hund", definition="a dog", language_code="en")

    body = client.get("/languages/da/words").json()
    assert body["total"] == 3
    assert [w["word"] for w in body["words"]] == ["bundt", "hund", "hundehus"]

    found = client.get("/languages/da/words/search", params={"q": "UND"}).json()
    assert [w["word"] for w in found] == ["bundt", "hund", "hundehus"]

    found = client.get("/languages/da/words/search", params={"q": "hun"}).json()
    assert [w["word"] for w in found] == ["hund", "hundehus"]

    assert client.get("/languages/xx/words").status_code == 400


def test_search_keeps_prefix_hits_when_limited(client, add_word):
    add_word(word="cat", definition="a cat", language_code="en")
    add_word(word="attic", definition="a room under the roof", language_code="en")

    found = client.get("/languages/en/words/search", params={"q": "at", "limit": 1}).json()
    assert [w["word"] for w in found] == ["attic"]

    found = client.get("/languages/en/words/search", params={"q": "AT"}).json()
    assert [w["word"] for w in found] == ["attic", "cat"]


def test_search_treats_wildcards_literally(client, add_word):
    add_word(word="hund", language_code="en")
    add_word(word="50%", definition="half", language_code="en")

    assert client.get("/languages/en/words/search", params={"q": "%"}).json()[0]["word"] == "50%"
    assert len(client.get("/languages/en/words/search", params={"q": "%"}).json()) == 1
    assert client.get("/languages/en/words/search", params={"q": "_"}).json() == []
