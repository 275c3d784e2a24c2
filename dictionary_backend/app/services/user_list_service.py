# dictionary_backend/app/services/user_list_service.py
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from dictionary_backend.app.models import (
    User,
    UserDictionary,
    UserList,
    UserListWord,
    VocabularyList,
)
from dictionary_backend.app.services import user_dictionary_service

logger = logging.getLogger(__name__)


class ListNotFound(LookupError):
    pass


def get_user_list(db: Session, user_id: str, user_list_id: str) -> UserList:
    user_list = (
        db.query(UserList)
        .filter(
            UserList.id == user_list_id,
            UserList.user_id == user_id,
            UserList.deleted_at.is_(None),
        )
        .first()
    )
    if user_list is None:
        raise ListNotFound(user_list_id)
    return user_list


def get_available_public_lists(db: Session, user: User) -> List[VocabularyList]:
    """Public lists the user has not added yet."""
    taken = (
        db.query(UserList.list_id)
        .filter(
            UserList.user_id == user.id,
            UserList.deleted_at.is_(None),
            UserList.list_id.isnot(None),
        )
    )
    return (
        db.query(VocabularyList)
        .filter(
            VocabularyList.is_public.is_(True),
            VocabularyList.deleted_at.is_(None),
            VocabularyList.id.notin_(taken),
        )
        .order_by(VocabularyList.name.asc())
        .all()
    )


def add_public_list(db: Session, user: User, list_id: str) -> UserList:
    vocab_list = (
        db.query(VocabularyList)
        .filter(
            VocabularyList.id == list_id,
            VocabularyList.is_public.is_(True),
            VocabularyList.deleted_at.is_(None),
        )
        .first()
    )
    if vocab_list is None:
        raise ListNotFound(list_id)

    existing = (
        db.query(UserList)
        .filter(
            UserList.user_id == user.id,
            UserList.list_id == list_id,
            UserList.deleted_at.is_(None),
        )
        .first()
    )
    if existing is not None:
        return existing

    try:
        user_list = UserList(
            user_id=user.id,
            list_id=vocab_list.id,
            base_language_code=vocab_list.base_language_code,
            target_language_code=vocab_list.target_language_code,
        )
        db.add(user_list)

        # 把词表里的释义复制进用户词典，再按原顺序挂到用户词表上
        for index, list_word in enumerate(vocab_list.words):
            entry = (
                db.query(UserDictionary)
                .filter(
                    UserDictionary.user_id == user.id,
                    UserDictionary.definition_id == list_word.definition_id,
                )
                .first()
            )
            if entry is None:
                entry = UserDictionary(
                    user_id=user.id,
                    definition_id=list_word.definition_id,
                    base_language_code=vocab_list.base_language_code,
                    target_language_code=vocab_list.target_language_code,
                )
                db.add(entry)
                db.flush()
            elif entry.deleted_at is not None:
                entry.deleted_at = None
            user_list.words.append(UserListWord(user_dictionary_id=entry.id, order_index=index))

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user_list)
    logger.info("User %s added public list %s (%d words)", user.id, list_id, len(user_list.words))
    return user_list


def create_custom_list(db: Session, user: User, data: dict) -> UserList:
    user_list = UserList(
        user_id=user.id,
        custom_name_of_list=data["name"],
        custom_description_of_list=data.get("description"),
        custom_cover_image_url=data.get("cover_image_url"),
        custom_difficulty=data.get("difficulty"),
        base_language_code=data["base_language_code"],
        target_language_code=data["target_language_code"],
        is_modified=True,
    )
    db.add(user_list)
    db.commit()
    db.refresh(user_list)
    return user_list


def update_user_list(db: Session, user_list: UserList, data: dict) -> UserList:
    mapping = {
        "name": "custom_name_of_list",
        "description": "custom_description_of_list",
        "cover_image_url": "custom_cover_image_url",
        "difficulty": "custom_difficulty",
    }
    for key, column in mapping.items():
        if key in data:
            setattr(user_list, column, data[key])
            user_list.is_modified = True
    if data.get("progress") is not None:
        user_list.progress = data["progress"]
    db.commit()
    db.refresh(user_list)
    return user_list


def remove_user_list(db: Session, user_list: UserList) -> None:
    user_list.deleted_at = datetime.utcnow()
    db.commit()


def add_word(db: Session, user_list: UserList, user_dictionary_id: str) -> Optional[UserListWord]:
    entry = user_dictionary_service.get_entry(db, user_list.user_id, user_dictionary_id)
    if any(w.user_dictionary_id == entry.id for w in user_list.words):
        return None
    next_index = max((w.order_index for w in user_list.words), default=-1) + 1
    link = UserListWord(user_dictionary_id=entry.id, order_index=next_index)
    user_list.words.append(link)
    if user_list.list_id is not None:
        user_list.is_modified = True
    db.commit()
    return link


def remove_word(db: Session, user_list: UserList, user_dictionary_id: str) -> bool:
    link = next((w for w in user_list.words if w.user_dictionary_id == user_dictionary_id), None)
    if link is None:
        return False
    user_list.words.remove(link)
    if user_list.list_id is not None:
        user_list.is_modified = True
    db.commit()
    return True


def get_list_words(db: Session, user_list: UserList) -> List[UserDictionary]:
    return [
        w.user_dictionary
        for w in user_list.words
        if w.user_dictionary.deleted_at is None
    ]
