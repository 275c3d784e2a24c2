# dictionary_backend/app/services/user_dictionary_service.py
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from dictionary_backend.app.models import (
    Definition,
    LearningStatus,
    User,
    UserDictionary,
)

logger = logging.getLogger(__name__)

CUSTOM_FIELDS = (
    "custom_definition_base",
    "custom_definition_target",
    "custom_phonetic",
    "custom_notes",
    "custom_tags",
    "custom_difficulty_level",
)


class EntryNotFound(LookupError):
    pass


def get_entry(db: Session, user_id: str, entry_id: str) -> UserDictionary:
    """Active entry owned by the user, otherwise EntryNotFound."""
    entry = (
        db.query(UserDictionary)
        .filter(
            UserDictionary.id == entry_id,
            UserDictionary.user_id == user_id,
            UserDictionary.deleted_at.is_(None),
        )
        .first()
    )
    if entry is None:
        raise EntryNotFound(entry_id)
    return entry


def list_entries(
    db: Session,
    user_id: str,
    page: int = 1,
    page_size: int = 20,
    learning_status: Optional[LearningStatus] = None,
    favorites_only: bool = False,
) -> Tuple[List[UserDictionary], int]:
    query = db.query(UserDictionary).filter(
        UserDictionary.user_id == user_id,
        UserDictionary.deleted_at.is_(None),
    )
    if learning_status:
        query = query.filter(UserDictionary.learning_status == learning_status)
    if favorites_only:
        query = query.filter(UserDictionary.is_favorite.is_(True))
    total = query.count()
    entries = (
        query.order_by(UserDictionary.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return entries, total


def add_definition(
    db: Session,
    user: User,
    definition_id: int,
    base_language_code=None,
    target_language_code=None,
) -> Tuple[UserDictionary, bool]:
    """
    把一条释义加入用户词典。返回 (entry, created)。
    已软删除的条目直接恢复，不重复插入。
    """
    definition = db.query(Definition).filter(Definition.id == definition_id).first()
    if definition is None:
        raise EntryNotFound(f"definition {definition_id}")

    entry = (
        db.query(UserDictionary)
        .filter(
            UserDictionary.user_id == user.id,
            UserDictionary.definition_id == definition_id,
        )
        .first()
    )
    if entry is not None:
        if entry.deleted_at is None:
            return entry, False
        entry.deleted_at = None
        db.commit()
        db.refresh(entry)
        logger.info("Restored user dictionary entry %s", entry.id)
        return entry, True

    entry = UserDictionary(
        user_id=user.id,
        definition_id=definition_id,
        base_language_code=base_language_code or user.base_language_code,
        target_language_code=target_language_code or user.target_language_code,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry, True


def update_learning_status(db: Session, entry: UserDictionary, data: dict) -> UserDictionary:
    now = datetime.utcnow()
    status = data["learning_status"]

    entry.learning_status = status
    entry.last_reviewed_at = now
    entry.review_count = (entry.review_count or 0) + 1

    if status == LearningStatus.inProgress and entry.time_word_was_started_to_learn is None:
        entry.time_word_was_started_to_learn = now
    if status == LearningStatus.learned:
        entry.time_word_was_learned = now
        if entry.time_word_was_started_to_learn is None:
            entry.time_word_was_started_to_learn = now

    for field in ("progress", "mastery_score", "next_review_due"):
        if data.get(field) is not None:
            setattr(entry, field, data[field])

    db.commit()
    db.refresh(entry)
    return entry


def toggle_favorite(db: Session, entry: UserDictionary) -> UserDictionary:
    entry.is_favorite = not entry.is_favorite
    db.commit()
    db.refresh(entry)
    return entry


def update_custom_data(db: Session, entry: UserDictionary, data: dict) -> UserDictionary:
    changed = False
    for field in CUSTOM_FIELDS:
        if field in data:
            setattr(entry, field, data[field])
            changed = True
    if changed:
        entry.is_modified = True
    db.commit()
    db.refresh(entry)
    return entry


def remove_entry(db: Session, entry: UserDictionary) -> None:
    entry.deleted_at = datetime.utcnow()
    db.commit()


def get_stats(db: Session, user_id: str) -> Dict:
    base = db.query(UserDictionary).filter(
        UserDictionary.user_id == user_id,
        UserDictionary.deleted_at.is_(None),
    )
    total = base.count()
    favorites = base.filter(UserDictionary.is_favorite.is_(True)).count()

    now = datetime.utcnow()
    needs_review = base.filter(
        (UserDictionary.learning_status == LearningStatus.needsReview)
        | (UserDictionary.next_review_due <= now)
    ).count()

    avg_mastery = (
        db.query(func.avg(UserDictionary.mastery_score))
        .filter(UserDictionary.user_id == user_id, UserDictionary.deleted_at.is_(None))
        .scalar()
    )

    by_status = {s.value: 0 for s in LearningStatus}
    rows = (
        db.query(UserDictionary.learning_status, func.count(UserDictionary.id))
        .filter(UserDictionary.user_id == user_id, UserDictionary.deleted_at.is_(None))
        .group_by(UserDictionary.learning_status)
        .all()
    )
    for status, count in rows:
        key = status.value if isinstance(status, LearningStatus) else str(status)
        by_status[key] = count

    return {
        "total_words": total,
        "favorites": favorites,
        "needs_review": needs_review,
        "average_mastery": round(float(avg_mastery or 0), 2),
        "by_status": by_status,
    }
