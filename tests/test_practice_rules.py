from datetime import datetime, timedelta

import pytest

from dictionary_backend.app.models import LearningStatus
from dictionary_backend.app.services.learning_metrics import (
    answer_points,
    calculate_mastery_score,
    calculate_next_review_date,
    determine_learning_status,
)
from dictionary_backend.app.utils.practice_validation import (
    calculate_accuracy,
    levenshtein_distance,
    validate_multiple_choice,
    validate_word_construction,
    validate_word_input,
)


# ---------- 拼写比较 ----------
@pytest.mark.parametrize("a, b, distance", [
    ("kitten", "sitting", 3),
    ("", "abc", 3),
    ("hund", "hund", 0),
    ("hnud", "hund", 2),
])
def test_levenshtein_distance(a, b, distance):
    assert levenshtein_distance(a, b) == distance
    assert levenshtein_distance(b, a) == distance


def test_accuracy():
    assert calculate_accuracy("hunde", "hund") == 80
    assert calculate_accuracy("HNUD", "hund") == 50
    assert calculate_accuracy("", "hund") == 0


def test_exact_typing_ignores_case_and_spaces():
    result = validate_word_input("  Hund ", "hund")
    assert result.is_correct is True
    assert result.accuracy == 100
    assert result.partial_credit is False
    assert result.differences == []


def test_close_typing_gets_partial_credit():
    result = validate_word_input("hunde", "hund")
    assert result.is_correct is False
    assert result.accuracy == 80
    assert result.partial_credit is True
    assert result.differences == [{"position": 4, "expected": "", "actual": "e"}]


def test_construction_is_more_lenient_than_typing():
    assert validate_word_input("hus", "huse").partial_credit is False
    assert validate_word_construction("hus", "huse").partial_credit is True
    assert validate_word_construction("hnud", "hund").partial_credit is False


def test_multiple_choice():
    assert validate_multiple_choice("Hund", "hund").accuracy == 100
    wrong = validate_multiple_choice("kat", "hund")
    assert wrong.is_correct is False
    assert wrong.accuracy == 0
    assert wrong.partial_credit is False


# ---------- 掌握度 / 状态 ----------
def test_mastery_score():
    assert calculate_mastery_score(50, 0, 20, 0) == 50
    assert calculate_mastery_score(60, 3, 5, 4) == 73
    assert calculate_mastery_score(70, 10, 30, 20) == 85
    assert calculate_mastery_score(100, 1, 2, 1) == 100


@pytest.mark.parametrize("correct, total, streak, mastery, status", [
    (0, 0, 0, 0, LearningStatus.notStarted),
    (1, 1, 1, 50, LearningStatus.inProgress),
    (0, 1, 0, 0, LearningStatus.difficult),
    (3, 3, 3, 90, LearningStatus.learned),
    (5, 10, 5, 90, LearningStatus.learned),
    (2, 5, 0, 40, LearningStatus.difficult),
    (3, 4, 2, 70, LearningStatus.inProgress),
])
def test_learning_status(correct, total, streak, mastery, status):
    assert determine_learning_status(correct, total, streak, mastery) == status


@pytest.mark.parametrize("review_count, accuracy, days", [
    (0, 60, 1),
    (1, 50, 1),
    (1, 80, 3),
    (1, 100, 7),
    (10, 95, 60),
])
def test_next_review_date(review_count, accuracy, days):
    base = datetime(2024, 1, 1, 12, 0)
    assert calculate_next_review_date(review_count, accuracy, base) == base + timedelta(days=days)


def test_answer_points():
    assert answer_points(True, False, 3000) == 15
    assert answer_points(True, False, 15000) == 10
    assert answer_points(False, True, 0) == 5
    assert answer_points(False, False, 0) == -2
