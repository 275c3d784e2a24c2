# dictionary_backend/app/services/session_service.py
"""
学习会话（练习记录）：创建 / 更新 / 逐题记录 / 历史分页 / 统计。
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from dictionary_backend.app.models import (
    UserDictionary,
    UserLearningSession,
    UserSessionItem,
)

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
STREAK_WINDOW = 10


class SessionNotFound(LookupError):
    pass


def get_session(db: Session, user_id: str, session_id: str) -> UserLearningSession:
    """Sessions of other users are reported as missing."""
    learning_session = (
        db.query(UserLearningSession)
        .filter(
            UserLearningSession.id == session_id,
            UserLearningSession.user_id == user_id,
        )
        .first()
    )
    if learning_session is None:
        raise SessionNotFound(session_id)
    return learning_session


def create_learning_session(db: Session, user_id: str, data: Dict[str, Any]) -> UserLearningSession:
    learning_session = UserLearningSession(
        user_id=user_id,
        session_type=data["session_type"],
        user_list_id=data.get("user_list_id"),
        list_id=data.get("list_id"),
        start_time=datetime.utcnow(),
        words_studied=0,
        words_learned=0,
        correct_answers=0,
        incorrect_answers=0,
        completion_percentage=0,
    )
    db.add(learning_session)
    db.commit()
    db.refresh(learning_session)
    logger.info(
        "Created learning session %s for user %s (%s)",
        learning_session.id, user_id, learning_session.session_type.value,
    )
    return learning_session


def update_learning_session(
    db: Session, learning_session: UserLearningSession, data: Dict[str, Any]
) -> UserLearningSession:
    data = dict(data)
    end_time = data.get("end_time")
    if end_time is not None and end_time.tzinfo is not None:
        # 数据库里统一存 naive UTC
        data["end_time"] = end_time.replace(tzinfo=None) - end_time.utcoffset()
    if data.get("end_time") is not None and data["end_time"] < learning_session.start_time:
        raise ValueError("end_time must not be earlier than start_time")

    for key, value in data.items():
        if value is not None:
            setattr(learning_session, key, value)

    if data.get("end_time") is not None and data.get("duration") is None:
        elapsed = data["end_time"] - learning_session.start_time
        learning_session.duration = round(elapsed.total_seconds())

    db.commit()
    db.refresh(learning_session)
    return learning_session


def add_session_item(
    db: Session,
    learning_session: UserLearningSession,
    data: Dict[str, Any],
    on_recorded: Optional[Callable[[UserDictionary, UserSessionItem], None]] = None,
) -> UserSessionItem:
    """
    记录一次作答，并在同一个事务里更新会话计数和用户词典条目的复习数据。
    ``on_recorded`` 在提交前调用，可以继续修改条目（练习模式用它更新掌握度）。
    """
    entry = (
        db.query(UserDictionary)
        .filter(
            UserDictionary.id == data["user_dictionary_id"],
            UserDictionary.user_id == learning_session.user_id,
        )
        .first()
    )
    if entry is None:
        raise SessionNotFound(f"user dictionary entry {data['user_dictionary_id']}")

    is_correct = bool(data["is_correct"])
    try:
        item = UserSessionItem(
            session_id=learning_session.id,
            user_dictionary_id=entry.id,
            is_correct=is_correct,
            response_time=data.get("response_time"),
            attempts_count=data.get("attempts_count") or 1,
        )
        db.add(item)

        learning_session.words_studied += 1
        if is_correct:
            learning_session.correct_answers += 1
        else:
            learning_session.incorrect_answers += 1

        entry.last_reviewed_at = datetime.utcnow()
        entry.review_count = (entry.review_count or 0) + 1
        if is_correct:
            entry.correct_streak = (entry.correct_streak or 0) + 1
        else:
            entry.amount_of_mistakes = (entry.amount_of_mistakes or 0) + 1
            entry.correct_streak = 0

        if on_recorded is not None:
            on_recorded(entry, item)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(item)
    return item


def get_current_session(db: Session, user_id: str) -> Optional[UserLearningSession]:
    return (
        db.query(UserLearningSession)
        .filter(
            UserLearningSession.user_id == user_id,
            UserLearningSession.end_time.is_(None),
        )
        .order_by(UserLearningSession.created_at.desc())
        .first()
    )


def get_session_history(
    db: Session,
    user_id: str,
    page: int = 1,
    page_size: int = 10,
    session_type=None,
    user_list_id: Optional[str] = None,
    list_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> Dict[str, Any]:
    if page < 1:
        raise ValueError("Page must be greater than 0")
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise ValueError(f"Page size must be between 1 and {MAX_PAGE_SIZE}")

    query = db.query(UserLearningSession).filter(UserLearningSession.user_id == user_id)
    if session_type:
        query = query.filter(UserLearningSession.session_type == session_type)
    if user_list_id:
        query = query.filter(UserLearningSession.user_list_id == user_list_id)
    if list_id:
        query = query.filter(UserLearningSession.list_id == list_id)
    # 日期范围只有起止都给了才生效
    if start_date and end_date:
        query = query.filter(
            UserLearningSession.start_time >= start_date,
            UserLearningSession.start_time <= end_date,
        )

    total = query.count()
    sessions = (
        query.order_by(UserLearningSession.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return {
        "sessions": sessions,
        "total": total,
        "page": page,
        "page_size": page_size,
        "has_next": page * page_size < total,
        "has_prev": page > 1,
    }


def calculate_streak(session_dates: List[datetime], today=None) -> int:
    """
    Consecutive days ending today. ``session_dates`` is newest first; the
    i-th entry must fall exactly i days before today.
    """
    today = today or datetime.utcnow().date()
    streak = 0
    for i, created in enumerate(session_dates):
        if (today - created.date()).days == i:
            streak += 1
        else:
            break
    return streak


def get_session_stats(db: Session, user_id: str) -> Dict[str, Any]:
    total_sessions = (
        db.query(func.count(UserLearningSession.id))
        .filter(UserLearningSession.user_id == user_id)
        .scalar()
    )
    total_words, avg_score = (
        db.query(
            func.coalesce(func.sum(UserLearningSession.words_studied), 0),
            func.avg(UserLearningSession.score),
        )
        .filter(UserLearningSession.user_id == user_id)
        .one()
    )
    recent = (
        db.query(UserLearningSession)
        .filter(UserLearningSession.user_id == user_id)
        .order_by(UserLearningSession.created_at.desc())
        .limit(STREAK_WINDOW)
        .all()
    )

    return {
        "total_sessions": total_sessions or 0,
        "total_words_studied": int(total_words or 0),
        "average_score": round(float(avg_score or 0), 2),
        "streak_days": calculate_streak([s.created_at for s in recent]),
        "last_session_date": recent[0].created_at if recent else None,
        "recent_sessions": recent,
    }


def words_studied_since(db: Session, user_id: str, since: datetime) -> int:
    value = (
        db.query(func.coalesce(func.sum(UserLearningSession.words_studied), 0))
        .filter(
            UserLearningSession.user_id == user_id,
            UserLearningSession.start_time >= since,
        )
        .scalar()
    )
    return int(value or 0)
