# dictionary_backend/app/services/learning_metrics.py
"""
单词掌握度 / 学习状态 / 间隔复习的计算规则。
"""
from datetime import datetime, timedelta
from typing import Optional

from dictionary_backend.app.models import LearningStatus

# ==========================
# 掌握度阈值
# ==========================
MIN_CORRECT_ATTEMPTS_TO_LEARN = 3
MIN_CONSECUTIVE_CORRECT_TO_LEARN = 2
MIN_ACCURACY_FOR_LEARNED = 80
MAX_WRONG_ATTEMPTS_BEFORE_DIFFICULT = 3
MAX_ACCURACY_FOR_DIFFICULT = 40
MIN_MASTERY_SCORE = 85
MIN_CONSECUTIVE_CORRECT_FOR_MASTERY = 5

# 间隔复习（天）
SPACED_REPETITION_INTERVALS = (1, 3, 7, 14, 30, 60)

# ==========================
# 练习计分
# ==========================
DEFAULT_WORDS_PER_SESSION = 10
MAX_WORDS_PER_SESSION = 50
POINTS_PER_CORRECT_ANSWER = 10
POINTS_PENALTY_PER_WRONG_ATTEMPT = 2
BONUS_POINTS_FOR_SPEED = 5
SPEED_BONUS_THRESHOLD_SECONDS = 10


def attempt_accuracy(correct_attempts: int, total_attempts: int) -> int:
    if total_attempts <= 0:
        return 0
    return round(correct_attempts * 100 / total_attempts)


def calculate_mastery_score(
    accuracy: float,
    consecutive_correct: int,
    avg_response_seconds: float,
    review_count: int,
) -> int:
    score = accuracy
    score += min(consecutive_correct * 2, 10)
    if avg_response_seconds <= SPEED_BONUS_THRESHOLD_SECONDS:
        score += 5
    score += min(review_count * 0.5, 5)
    return min(round(score), 100)


def determine_learning_status(
    correct_attempts: int,
    total_attempts: int,
    consecutive_correct: int,
    mastery_score: float,
) -> LearningStatus:
    accuracy = attempt_accuracy(correct_attempts, total_attempts)

    if mastery_score >= MIN_MASTERY_SCORE and consecutive_correct >= MIN_CONSECUTIVE_CORRECT_FOR_MASTERY:
        return LearningStatus.learned

    if (
        correct_attempts >= MIN_CORRECT_ATTEMPTS_TO_LEARN
        and accuracy >= MIN_ACCURACY_FOR_LEARNED
        and consecutive_correct >= MIN_CONSECUTIVE_CORRECT_TO_LEARN
    ):
        return LearningStatus.learned

    wrong_attempts = total_attempts - correct_attempts
    if total_attempts > 0 and (
        wrong_attempts >= MAX_WRONG_ATTEMPTS_BEFORE_DIFFICULT
        or accuracy <= MAX_ACCURACY_FOR_DIFFICULT
    ):
        return LearningStatus.difficult

    if total_attempts > 0:
        return LearningStatus.inProgress
    return LearningStatus.notStarted


def calculate_next_review_date(
    review_count: int,
    accuracy: float,
    last_review: Optional[datetime] = None,
) -> datetime:
    """Struggling words come back one step sooner, easy ones one step later."""
    top = len(SPACED_REPETITION_INTERVALS) - 1
    index = min(review_count, top)
    if accuracy < 70:
        index = max(0, index - 1)
    elif accuracy >= 90:
        index = min(top, index + 1)
    return (last_review or datetime.utcnow()) + timedelta(days=SPACED_REPETITION_INTERVALS[index])


def answer_points(is_correct: bool, partial_credit: bool, response_time_ms: int) -> int:
    if is_correct:
        points = POINTS_PER_CORRECT_ANSWER
        if response_time_ms <= SPEED_BONUS_THRESHOLD_SECONDS * 1000:
            points += BONUS_POINTS_FOR_SPEED
        return points
    if partial_credit:
        return round(POINTS_PER_CORRECT_ANSWER * 0.5)
    return -POINTS_PENALTY_PER_WRONG_ATTEMPT
