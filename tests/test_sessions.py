from datetime import date, datetime, timedelta

import pytest

from dictionary_backend.app.models import UserDictionary, UserLearningSession
from dictionary_backend.app.services import session_service
from dictionary_backend.app.services.session_service import calculate_streak


@pytest.fixture
def entry_id(user, add_word):
    return add_word(owner=user)["user_dictionary_id"]


def start(client, headers, session_type="practice"):
    return client.post("/sessions", json={"session_type": session_type}, headers=headers)


def test_create_session(client, auth_headers, user):
    res = start(client, auth_headers)
    assert res.status_code == 201
    assert "no-store" in res.headers["Cache-Control"]
    body = res.json()
    assert body["user_id"] == user.id
    assert body["session_type"] == "practice"
    assert body["words_studied"] == 0
    assert body["correct_answers"] == 0
    assert body["completion_percentage"] == 0
    assert body["end_time"] is None


def test_create_session_rejects_unknown_type(client, auth_headers):
    assert start(client, auth_headers, "cramming").status_code == 400


def test_create_session_requires_type(client, auth_headers):
    assert client.post("/sessions", json={}, headers=auth_headers).status_code == 400


def test_create_session_requires_auth(client):
    assert client.post("/sessions", json={"session_type": "review"}).status_code == 401


def test_finish_session_computes_duration(client, auth_headers, db_session):
    session_id = start(client, auth_headers).json()["id"]
    started = db_session.get(UserLearningSession, session_id).start_time
    end_time = started + timedelta(seconds=90)

    res = client.patch(
        f"/sessions/{session_id}",
        json={"end_time": end_time.isoformat(), "score": 80, "completion_percentage": 100},
        headers=auth_headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["duration"] == 90
    assert body["score"] == 80
    assert body["completion_percentage"] == 100


def test_explicit_duration_wins(client, auth_headers):
    session_id = start(client, auth_headers).json()["id"]
    res = client.patch(
        f"/sessions/{session_id}",
        json={"end_time": datetime.utcnow().isoformat(), "duration": 5},
        headers=auth_headers,
    )
    assert res.json()["duration"] == 5


def test_end_time_before_start_is_rejected(client, auth_headers, db_session):
    session_id = start(client, auth_headers).json()["id"]
    started = db_session.get(UserLearningSession, session_id).start_time

    res = client.patch(
        f"/sessions/{session_id}",
        json={"end_time": (started - timedelta(minutes=5)).isoformat()},
        headers=auth_headers,
    )
    assert res.status_code == 400
    db_session.expire_all()
    stored = db_session.get(UserLearningSession, session_id)
    assert stored.end_time is None
    assert stored.duration is None


def test_update_rejects_out_of_range_completion(client, auth_headers):
    session_id = start(client, auth_headers).json()["id"]
    res = client.patch(f"/sessions/{session_id}", json={"completion_percentage": 150}, headers=auth_headers)
    assert res.status_code == 400


def test_add_items_updates_counters_and_entry(client, auth_headers, entry_id, db_session):
    session_id = start(client, auth_headers).json()["id"]

    ok = client.post(
        f"/sessions/{session_id}/items",
        json={"user_dictionary_id": entry_id, "is_correct": True, "response_time": 1200},
        headers=auth_headers,
    )
    assert ok.status_code == 201
    assert ok.json()["attempts_count"] == 1

    client.post(
        f"/sessions/{session_id}/items",
        json={"user_dictionary_id": entry_id, "is_correct": False, "attempts_count": 2},
        headers=auth_headers,
    )

    detail = client.get(f"/sessions/{session_id}", headers=auth_headers).json()
    assert detail["words_studied"] == 2
    assert detail["correct_answers"] == 1
    assert detail["incorrect_answers"] == 1
    assert len(detail["items"]) == 2

    entry = db_session.get(UserDictionary, entry_id)
    db_session.refresh(entry)
    assert entry.review_count == 2
    assert entry.amount_of_mistakes == 1
    assert entry.correct_streak == 0
    assert entry.last_reviewed_at is not None


def test_add_item_for_foreign_entry(client, auth_headers, other_user, add_word):
    foreign_entry = add_word(word="kat", definition="a cat", owner=other_user)["user_dictionary_id"]
    session_id = start(client, auth_headers).json()["id"]
    res = client.post(
        f"/sessions/{session_id}/items",
        json={"user_dictionary_id": foreign_entry, "is_correct": True},
        headers=auth_headers,
    )
    assert res.status_code == 404


def test_other_users_session_is_hidden(client, auth_headers, other_user, headers_for):
    session_id = start(client, headers_for(other_user)).json()["id"]
    assert client.get(f"/sessions/{session_id}", headers=auth_headers).status_code == 404
    res = client.patch(f"/sessions/{session_id}", json={"score": 1}, headers=auth_headers)
    assert res.status_code == 404
    assert res.json()["detail"] == "Session not found"


def test_current_session_is_latest_open_one(client, auth_headers):
    first = start(client, auth_headers).json()["id"]
    client.patch(f"/sessions/{first}", json={"end_time": datetime.utcnow().isoformat()}, headers=auth_headers)
    assert client.get("/sessions/current", headers=auth_headers).json() is None

    second = start(client, auth_headers, "review").json()["id"]
    res = client.get("/sessions/current", headers=auth_headers)
    assert res.json()["id"] == second


def test_history_pagination(client, auth_headers):
    for _ in range(3):
        start(client, auth_headers)
    start(client, auth_headers, "review")

    res = client.get("/sessions/history", params={"page": 1, "page_size": 3}, headers=auth_headers)
    body = res.json()
    assert body["total"] == 4
    assert len(body["sessions"]) == 3
    assert body["has_next"] is True
    assert body["has_prev"] is False

    res = client.get("/sessions/history", params={"page": 2, "page_size": 3}, headers=auth_headers)
    body = res.json()
    assert len(body["sessions"]) == 1
    assert body["has_next"] is False
    assert body["has_prev"] is True

    res = client.get("/sessions/history", params={"session_type": "review"}, headers=auth_headers)
    assert res.json()["total"] == 1


@pytest.mark.parametrize("params", [{"page": 0}, {"page_size": 0}, {"page_size": 101}])
def test_history_rejects_bad_paging(client, auth_headers, params):
    assert client.get("/sessions/history", params=params, headers=auth_headers).status_code == 400


def test_history_rejects_bad_date(client, auth_headers):
    res = client.get("/sessions/history", params={"start_date": "yesterday"}, headers=auth_headers)
    assert res.status_code == 400


def test_history_date_range_needs_both_ends(client, auth_headers):
    start(client, auth_headers)
    future = (datetime.utcnow() + timedelta(days=2)).isoformat()

    only_start = client.get("/sessions/history", params={"start_date": future}, headers=auth_headers)
    assert only_start.json()["total"] == 1

    both = client.get(
        "/sessions/history",
        params={"start_date": future, "end_date": future},
        headers=auth_headers,
    )
    assert both.json()["total"] == 0


def test_stats(client, auth_headers):
    for score in (60, 80):
        session_id = start(client, auth_headers).json()["id"]
        client.patch(f"/sessions/{session_id}", json={"score": score, "words_studied": 4}, headers=auth_headers)

    body = client.get("/sessions/stats", headers=auth_headers).json()
    assert body["total_sessions"] == 2
    assert body["total_words_studied"] == 8
    assert body["average_score"] == 70
    assert body["streak_days"] == 1
    assert body["last_session_date"] is not None
    assert len(body["recent_sessions"]) == 2


def test_stats_for_new_user(client, auth_headers):
    body = client.get("/sessions/stats", headers=auth_headers).json()
    assert body["total_sessions"] == 0
    assert body["average_score"] == 0
    assert body["streak_days"] == 0
    assert body["last_session_date"] is None


def _days_ago(today, *offsets):
    return [datetime.combine(today - timedelta(days=o), datetime.min.time()) for o in offsets]


def test_streak_counts_consecutive_days():
    today = date(2024, 5, 10)
    assert calculate_streak(_days_ago(today, 0, 1, 2), today=today) == 3


def test_streak_breaks_on_gap():
    today = date(2024, 5, 10)
    assert calculate_streak(_days_ago(today, 0, 2, 3), today=today) == 1


def test_streak_zero_without_session_today():
    today = date(2024, 5, 10)
    assert calculate_streak(_days_ago(today, 1, 2), today=today) == 0
    assert calculate_streak([], today=today) == 0


def test_streak_second_session_same_day_stops_count():
    today = date(2024, 5, 10)
    assert calculate_streak(_days_ago(today, 0, 0, 1), today=today) == 1


def test_history_service_validates_page(db_session, user):
    with pytest.raises(ValueError):
        session_service.get_session_history(db_session, user.id, page=0)
