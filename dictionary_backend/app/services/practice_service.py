# dictionary_backend/app/services/practice_service.py
"""
练习模式：挑词开练 -> 逐题校验作答 -> 结束并出总结。

作答记录复用 session_service.add_session_item（会话计数 / 连对 / 错误次数），
在同一个事务里再按 learning_metrics 的规则更新掌握度、学习状态和下次复习时间。
"""
import logging
import random
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from dictionary_backend.app.models import (
    LearningStatus,
    ListWord,
    SessionType,
    User,
    UserDictionary,
    UserLearningSession,
    UserListWord,
    VocabularyList,
    Word,
)
from dictionary_backend.app.services import learning_metrics, session_service
from dictionary_backend.app.services import user_dictionary_service, user_list_service
from dictionary_backend.app.utils.practice_validation import (
    validate_multiple_choice,
    validate_word_construction,
    validate_word_input,
)

logger = logging.getLogger(__name__)

CHOICE_DISTRACTORS = 3

VALIDATORS = {
    "typing": validate_word_input,
    "construction": validate_word_construction,
    "multiple_choice": validate_multiple_choice,
}


class PracticeError(ValueError):
    pass


class PracticeListNotFound(LookupError):
    pass


# ==========================
# 单词信息
# ==========================
def _primary_details(entry: UserDictionary):
    links = sorted(entry.definition.word_details, key=lambda link: not link.is_primary)
    return links[0].word_details if links else None


def word_text_for(entry: UserDictionary) -> str:
    details = _primary_details(entry)
    return details.word.word if details is not None and details.word is not None else ""


def _audio_url(entry: UserDictionary, details) -> Optional[str]:
    for link in entry.definition.audio_links:
        return link.audio.url
    if details is not None:
        for link in details.audio_links:
            return link.audio.url
    return None


def choice_options(db: Session, entry: UserDictionary, rng: random.Random) -> List[str]:
    """The right word plus up to three other words of the same language, shuffled."""
    details = _primary_details(entry)
    if details is None or details.word is None:
        return []
    correct = details.word.word
    rows = (
        db.query(Word.word)
        .filter(
            Word.language_code == details.word.language_code,
            func.lower(Word.word) != correct.lower(),
        )
        .order_by(Word.frequency_general.desc(), Word.word.asc())
        .limit(15)
        .all()
    )
    distractors = []
    for (text,) in rows:
        if text not in distractors:
            distractors.append(text)
    options = [correct] + distractors[:CHOICE_DISTRACTORS]
    rng.shuffle(options)
    return options


def practice_word(db: Session, entry: UserDictionary, rng: random.Random) -> Dict[str, Any]:
    definition = entry.definition
    details = _primary_details(entry)
    word = details.word if details is not None else None
    return {
        "user_dictionary_id": entry.id,
        "word_text": word.word if word is not None else "",
        "definition": entry.custom_definition_base or definition.definition,
        "learning_status": entry.learning_status,
        "attempts": entry.review_count or 0,
        "correct_streak": entry.correct_streak or 0,
        "mastery_score": entry.mastery_score or 0,
        "part_of_speech": details.part_of_speech if details is not None else None,
        "phonetic": entry.custom_phonetic or (details.phonetic if details is not None else None)
        or (word.phonetic_general if word is not None else None),
        "image_url": definition.image.url if definition.image else None,
        "audio_url": _audio_url(entry, details),
        "options": choice_options(db, entry, rng),
    }


# ==========================
# 挑词
# ==========================
def select_practice_entries(
    db: Session,
    user_id: str,
    list_id: Optional[str] = None,
    user_list_id: Optional[str] = None,
    difficulty: Optional[int] = None,
    due_only: bool = False,
    limit: int = learning_metrics.DEFAULT_WORDS_PER_SESSION,
) -> List[UserDictionary]:
    """
    Entries to practise, most overdue first. Entries never scheduled come
    after the scheduled ones.

    difficulty 1: new or barely started words (mastery < 50)
    difficulty 2: words in progress with mastery between 30 and 70
    difficulty 3: words marked for review or as difficult
    """
    query = db.query(UserDictionary).filter(
        UserDictionary.user_id == user_id,
        UserDictionary.deleted_at.is_(None),
    )
    if list_id:
        query = query.filter(UserDictionary.definition_id.in_(
            select(ListWord.definition_id).where(ListWord.list_id == list_id)
        ))
    elif user_list_id:
        query = query.filter(UserDictionary.id.in_(
            select(UserListWord.user_dictionary_id).where(UserListWord.user_list_id == user_list_id)
        ))

    if difficulty == 1:
        query = query.filter(
            UserDictionary.learning_status.in_([LearningStatus.notStarted, LearningStatus.inProgress]),
            UserDictionary.mastery_score < 50,
        )
    elif difficulty == 2:
        query = query.filter(
            UserDictionary.learning_status == LearningStatus.inProgress,
            UserDictionary.mastery_score >= 30,
            UserDictionary.mastery_score < 70,
        )
    elif difficulty == 3:
        query = query.filter(
            UserDictionary.learning_status.in_([LearningStatus.needsReview, LearningStatus.difficult])
        )

    if due_only:
        query = query.filter(
            UserDictionary.next_review_due.is_(None) | (UserDictionary.next_review_due <= datetime.utcnow())
        )

    return (
        query.order_by(
            UserDictionary.next_review_due.is_(None),
            UserDictionary.next_review_due.asc(),
            UserDictionary.last_reviewed_at.is_(None),
            UserDictionary.last_reviewed_at.asc(),
            UserDictionary.created_at.asc(),
        )
        .limit(limit)
        .all()
    )


# ==========================
# 会话
# ==========================
def create_practice_session(
    db: Session,
    user: User,
    data: Dict[str, Any],
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    list_id = data.get("list_id")
    user_list_id = data.get("user_list_id")

    if user_list_id:
        try:
            user_list_service.get_user_list(db, user.id, user_list_id)
        except user_list_service.ListNotFound:
            raise PracticeListNotFound(user_list_id)
    if list_id:
        exists = (
            db.query(VocabularyList.id)
            .filter(VocabularyList.id == list_id, VocabularyList.deleted_at.is_(None))
            .first()
        )
        if exists is None:
            raise PracticeListNotFound(list_id)

    entries = select_practice_entries(
        db,
        user.id,
        list_id=list_id,
        user_list_id=user_list_id,
        difficulty=data.get("difficulty"),
        due_only=bool(data.get("due_only")),
        limit=data.get("words_to_study") or learning_metrics.DEFAULT_WORDS_PER_SESSION,
    )
    if not entries:
        raise PracticeError("No words available for practice with current settings")

    learning_session = session_service.create_learning_session(db, user.id, {
        "session_type": SessionType.practice,
        "list_id": list_id,
        "user_list_id": user_list_id,
    })
    rng = rng or random.Random()
    words = [practice_word(db, entry, rng) for entry in entries]
    logger.info("Practice session %s started with %d words", learning_session.id, len(words))
    return {"session": learning_session, "words": words}


def _feedback(comparison, response_time_ms: int, correct_word: str) -> str:
    if comparison.is_correct:
        if response_time_ms <= learning_metrics.SPEED_BONUS_THRESHOLD_SECONDS * 1000:
            return "Perfect! Great speed!"
        return "Correct!"
    if comparison.partial_credit:
        return f"Close! ({comparison.accuracy}% accuracy)"
    return f'Incorrect. The correct spelling is: "{correct_word}"'


def submit_answer(db: Session, learning_session: UserLearningSession, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check one answer, record it as a session item and move the entry's
    mastery score, learning status and next review date.
    """
    if learning_session.end_time is not None:
        raise PracticeError("Session already completed")

    entry = user_dictionary_service.get_entry(db, learning_session.user_id, data["user_dictionary_id"])
    correct_word = word_text_for(entry)
    if not correct_word:
        raise PracticeError("Correct word not found")

    answer_type = data.get("answer_type") or "typing"
    comparison = VALIDATORS[answer_type](data.get("user_input") or "", correct_word)
    response_time = data.get("response_time") or 0

    def apply_progress(recorded: UserDictionary, item) -> None:
        # add_session_item 已经更新了 review_count / correct_streak / amount_of_mistakes
        now = datetime.utcnow()
        review_count = recorded.review_count or 0
        streak = recorded.correct_streak or 0
        correct_attempts = max(review_count - (recorded.amount_of_mistakes or 0), 0)

        mastery = learning_metrics.calculate_mastery_score(
            comparison.accuracy, streak, response_time / 1000, review_count
        )
        status = learning_metrics.determine_learning_status(
            correct_attempts, review_count, streak, mastery
        )

        if status == LearningStatus.learned and recorded.learning_status != LearningStatus.learned:
            learning_session.words_learned += 1
            recorded.time_word_was_learned = now
        if status in (LearningStatus.inProgress, LearningStatus.learned) \
                and recorded.time_word_was_started_to_learn is None:
            recorded.time_word_was_started_to_learn = now

        recorded.learning_status = status
        recorded.mastery_score = mastery
        recorded.next_review_due = learning_metrics.calculate_next_review_date(
            review_count, comparison.accuracy, now
        )

    item = session_service.add_session_item(
        db,
        learning_session,
        {
            "user_dictionary_id": entry.id,
            "is_correct": comparison.is_correct,
            "response_time": response_time,
            "attempts_count": 1,
        },
        on_recorded=apply_progress,
    )
    db.refresh(entry)

    return {
        "is_correct": comparison.is_correct,
        "accuracy": comparison.accuracy,
        "partial_credit": comparison.partial_credit,
        "points_earned": learning_metrics.answer_points(
            comparison.is_correct, comparison.partial_credit, response_time
        ),
        "feedback": _feedback(comparison, response_time, correct_word),
        "correct_word": correct_word,
        "differences": comparison.differences,
        "learning_status": entry.learning_status,
        "mastery_score": entry.mastery_score,
        "next_review_due": entry.next_review_due,
        "item": item,
    }


def get_practice_progress(learning_session: UserLearningSession) -> Dict[str, Any]:
    items = learning_session.items
    correct = sum(1 for item in items if item.is_correct)
    incorrect = len(items) - correct
    end = learning_session.end_time or datetime.utcnow()
    return {
        "words_studied": len(items),
        "correct_answers": correct,
        "incorrect_answers": incorrect,
        "accuracy": round(correct * 100 / len(items), 2) if items else 0,
        "words_learned": learning_session.words_learned or 0,
        "time_elapsed": round((end - learning_session.start_time).total_seconds() * 1000),
        "current_score": max(0, correct * learning_metrics.POINTS_PER_CORRECT_ANSWER
                             - incorrect * learning_metrics.POINTS_PENALTY_PER_WRONG_ATTEMPT),
    }


def complete_practice_session(db: Session, learning_session: UserLearningSession) -> Dict[str, Any]:
    if learning_session.end_time is not None:
        raise PracticeError("Session already completed")

    items = learning_session.items
    total = len(items)
    correct = sum(1 for item in items if item.is_correct)
    total_time = sum(item.response_time or 0 for item in items)
    average_time = total_time / total if total else 0
    accuracy = correct * 100 / total if total else 0

    difficulty = sum(
        min(100, (item.user_dictionary.amount_of_mistakes or 0) * 10
            + (100 - (item.user_dictionary.mastery_score or 0)))
        for item in items
    ) / max(total, 1)

    end_time = datetime.utcnow()
    learning_session.end_time = end_time
    learning_session.duration = round((end_time - learning_session.start_time).total_seconds())
    learning_session.score = learning_metrics.calculate_mastery_score(
        accuracy, correct, average_time / 1000, total
    )
    learning_session.completion_percentage = 100
    db.commit()
    db.refresh(learning_session)
    logger.info("Practice session %s completed: %d/%d correct", learning_session.id, correct, total)

    return {
        "session_id": learning_session.id,
        "total_words": total,
        "correct_answers": correct,
        "incorrect_answers": total - correct,
        "accuracy": round(accuracy, 2),
        "total_time": total_time,
        "average_time": round(average_time, 2),
        "session_score": learning_session.score,
        "words_learned": learning_session.words_learned or 0,
        "difficulty_score": round(difficulty, 2),
        "start_time": learning_session.start_time,
        "end_time": learning_session.end_time,
        "words": [
            {
                "user_dictionary_id": item.user_dictionary_id,
                "word_text": word_text_for(item.user_dictionary),
                "is_correct": item.is_correct,
                "response_time": item.response_time or 0,
                "attempts": item.attempts_count or 1,
            }
            for item in items
        ],
    }


def cancel_practice_session(db: Session, learning_session: UserLearningSession) -> UserLearningSession:
    if learning_session.end_time is not None:
        raise PracticeError("Session already completed")
    now = datetime.utcnow()
    learning_session.end_time = now
    learning_session.duration = round((now - learning_session.start_time).total_seconds())
    db.commit()
    db.refresh(learning_session)
    logger.info("Practice session %s cancelled", learning_session.id)
    return learning_session
