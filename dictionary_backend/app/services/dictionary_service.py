# dictionary_backend/app/services/dictionary_service.py
"""
词典数据的录入和管理：单词 / 词性 / 释义 / 例句 / 音频 / 分类 / 词表。

录入一条单词 (add_word_entry) 在同一个事务里完成：
    1. 按 (word, language_code) upsert Word
    2. 新建 WordDetails
    3. 新建 Definition 并通过 WordDefinition 关联
    4. 新建例句
    5. 可选：加入当前用户的词典
任何一步失败都会整体回滚。
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from dictionary_backend.app.models import (
    Audio,
    Category,
    Definition,
    DefinitionExample,
    ListWord,
    User,
    UserDictionary,
    VocabularyList,
    Word,
    WordDefinition,
    WordDetails,
    WordDetailsAudio,
)
from dictionary_backend.app.schemas.dictionary import WordEntryCreate

logger = logging.getLogger(__name__)


# ==========================
# 序列化
# ==========================
def _audio_to_dict(link) -> Dict[str, Any]:
    return {
        "id": link.audio.id,
        "url": link.audio.url,
        "source": link.audio.source,
        "language_code": link.audio.language_code,
        "is_primary": link.is_primary,
    }


def _definition_to_dict(d: Definition, is_primary: bool = False) -> Dict[str, Any]:
    return {
        "id": d.id,
        "definition": d.definition,
        "language_code": d.language_code,
        "source": d.source,
        "is_primary": is_primary,
        "subject_status_labels": d.subject_status_labels,
        "general_labels": d.general_labels,
        "grammatical_note": d.grammatical_note,
        "usage_note": d.usage_note,
        "is_in_short_def": d.is_in_short_def,
        "image": {"id": d.image.id, "url": d.image.url, "description": d.image.description} if d.image else None,
        "examples": [
            {
                "id": e.id,
                "example": e.example,
                "grammatical_note": e.grammatical_note,
                "source": e.source,
                "language_code": e.language_code,
            }
            for e in d.examples
        ],
        "audio": [_audio_to_dict(a) for a in d.audio_links],
    }


def word_to_dict(word: Word) -> Dict[str, Any]:
    return {
        "id": word.id,
        "word": word.word,
        "language_code": word.language_code,
        "phonetic_general": word.phonetic_general,
        "frequency_general": word.frequency_general,
        "is_highlighted": word.is_highlighted,
        "etymology": word.etymology,
        "details": [
            {
                "id": wd.id,
                "part_of_speech": wd.part_of_speech,
                "variant": wd.variant,
                "gender": wd.gender,
                "phonetic": wd.phonetic,
                "forms": wd.forms,
                "frequency": wd.frequency,
                "is_plural": wd.is_plural,
                "source": wd.source,
                "audio": [_audio_to_dict(a) for a in wd.audio_links],
                "definitions": [
                    _definition_to_dict(link.definition, link.is_primary)
                    for link in sorted(wd.definitions, key=lambda l: (not l.is_primary, l.definition_id))
                ],
            }
            for wd in word.details
        ],
    }


# ==========================
# 录入
# ==========================
def add_word_entry(db: Session, data: WordEntryCreate, user: Optional[User] = None) -> Dict[str, Any]:
    try:
        word = (
            db.query(Word)
            .filter(Word.word == data.word, Word.language_code == data.language_code)
            .first()
        )
        if word is None:
            word = Word(
                word=data.word,
                language_code=data.language_code,
                phonetic_general=data.phonetic,
                etymology=data.etymology,
            )
            db.add(word)
            db.flush()

        details = WordDetails(
            word_id=word.id,
            part_of_speech=data.part_of_speech,
            variant=data.variant,
            gender=data.gender,
            phonetic=data.phonetic,
            forms=data.forms,
            frequency=data.frequency,
            is_plural=data.is_plural,
            source=data.source,
        )
        db.add(details)

        definition_language = data.definition_language_code or data.language_code
        definition = Definition(
            definition=data.definition,
            source=data.source,
            language_code=definition_language,
        )
        db.add(definition)
        db.flush()

        db.add(WordDefinition(
            word_details_id=details.id,
            definition_id=definition.id,
            is_primary=data.is_primary,
        ))

        examples = []
        for ex in data.examples:
            example = DefinitionExample(
                example=ex.example,
                grammatical_note=ex.grammatical_note,
                source=ex.source,
                language_code=ex.language_code or data.language_code,
                definition_id=definition.id,
            )
            db.add(example)
            examples.append(example)
        db.flush()

        entry = None
        if data.add_to_user_dictionary and user is not None:
            entry = UserDictionary(
                user_id=user.id,
                definition_id=definition.id,
                base_language_code=user.base_language_code,
                target_language_code=data.language_code,
                time_word_was_started_to_learn=datetime.utcnow(),
            )
            db.add(entry)
            db.flush()

        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to add word entry %r", data.word)
        raise

    logger.info("Added word entry %s (word_id=%s, definition_id=%s)", data.word, word.id, definition.id)
    return {
        "word_id": word.id,
        "word_details_id": details.id,
        "definition_id": definition.id,
        "example_ids": [e.id for e in examples],
        "user_dictionary_id": entry.id if entry else None,
    }


# ==========================
# 管理端：单词
# ==========================
def list_words(
    db: Session,
    page: int = 1,
    page_size: int = 20,
    search: Optional[str] = None,
    language_code=None,
    part_of_speech=None,
) -> Tuple[List[Word], int]:
    query = db.query(Word)
    if search:
        query = query.filter(Word.word.ilike(f"%{search}%"))
    if language_code:
        query = query.filter(Word.language_code == language_code)
    if part_of_speech:
        query = query.filter(
            Word.details.any(WordDetails.part_of_speech == part_of_speech)
        )
    total = query.count()
    words = (
        query.order_by(Word.word.asc(), Word.id.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return words, total


def get_word(db: Session, word_id: int) -> Optional[Word]:
    return (
        db.query(Word)
        .options(
            selectinload(Word.details)
            .selectinload(WordDetails.definitions)
            .selectinload(WordDefinition.definition)
            .selectinload(Definition.examples),
            selectinload(Word.details).selectinload(WordDetails.audio_links),
        )
        .filter(Word.id == word_id)
        .first()
    )


def update_word(db: Session, word: Word, data: dict) -> Word:
    for key, value in data.items():
        setattr(word, key, value)
    db.commit()
    db.refresh(word)
    return word


def delete_word(db: Session, word: Word) -> int:
    """
    删除单词（WordDetails / WordDefinition 级联删除），
    并清理删除后不再被任何词性引用的释义。返回删除的释义数量。
    """
    word_id = word.id
    definition_ids = {
        link.definition_id for wd in word.details for link in wd.definitions
    }
    db.delete(word)
    db.flush()

    removed = 0
    for def_id in definition_ids:
        still_linked = db.query(WordDefinition).filter(WordDefinition.definition_id == def_id).first()
        if still_linked is None:
            db.query(Definition).filter(Definition.id == def_id).delete(synchronize_session=False)
            removed += 1
    db.commit()
    logger.info("Deleted word %s and %d orphaned definitions", word_id, removed)
    return removed


# ==========================
# 管理端：释义 / 例句 / 音频
# ==========================
def get_definition(db: Session, definition_id: int) -> Optional[Definition]:
    return db.query(Definition).filter(Definition.id == definition_id).first()


def update_definition(db: Session, definition: Definition, data: dict) -> Definition:
    for key, value in data.items():
        setattr(definition, key, value)
    db.commit()
    db.refresh(definition)
    return definition


def add_example(db: Session, definition: Definition, data: dict) -> DefinitionExample:
    example = DefinitionExample(
        example=data["example"],
        grammatical_note=data.get("grammatical_note"),
        source=data.get("source"),
        language_code=data.get("language_code") or definition.language_code,
        definition_id=definition.id,
    )
    db.add(example)
    db.commit()
    db.refresh(example)
    return example


def delete_example(db: Session, example_id: int) -> bool:
    example = db.query(DefinitionExample).filter(DefinitionExample.id == example_id).first()
    if not example:
        return False
    db.delete(example)
    db.commit()
    return True


def attach_audio(db: Session, details: WordDetails, data: dict) -> Audio:
    audio = Audio(url=data["url"], source=data["source"], language_code=data["language_code"])
    db.add(audio)
    db.flush()
    if data.get("is_primary"):
        for link in details.audio_links:
            link.is_primary = False
    db.add(WordDetailsAudio(
        word_details_id=details.id,
        audio_id=audio.id,
        is_primary=bool(data.get("is_primary")),
    ))
    db.commit()
    db.refresh(audio)
    return audio


def detach_audio(db: Session, word_details_id: int, audio_id: int) -> bool:
    """只解除关联；Audio 行留给定时清理任务回收"""
    deleted = (
        db.query(WordDetailsAudio)
        .filter(
            WordDetailsAudio.word_details_id == word_details_id,
            WordDetailsAudio.audio_id == audio_id,
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0


# ==========================
# 分类
# ==========================
def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name.asc()).all()


def create_category(db: Session, name: str, description: Optional[str] = None) -> Category:
    category = Category(name=name, description=description)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


# ==========================
# 词表（管理端）
# ==========================
def list_lists(
    db: Session,
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    difficulty_level=None,
    language_code=None,
    is_public: Optional[bool] = None,
    include_deleted: bool = False,
) -> List[VocabularyList]:
    query = db.query(VocabularyList)
    if not include_deleted:
        query = query.filter(VocabularyList.deleted_at.is_(None))
    if search:
        query = query.filter(or_(
            VocabularyList.name.ilike(f"%{search}%"),
            VocabularyList.description.ilike(f"%{search}%"),
        ))
    if category_id is not None:
        query = query.filter(VocabularyList.category_id == category_id)
    if difficulty_level:
        query = query.filter(VocabularyList.difficulty_level == difficulty_level)
    if language_code:
        query = query.filter(or_(
            VocabularyList.base_language_code == language_code,
            VocabularyList.target_language_code == language_code,
        ))
    if is_public is not None:
        query = query.filter(VocabularyList.is_public == is_public)
    return query.order_by(VocabularyList.created_at.desc()).all()


def get_list(db: Session, list_id: str) -> Optional[VocabularyList]:
    return db.query(VocabularyList).filter(VocabularyList.id == list_id).first()


def _append_definitions(db: Session, vocab_list: VocabularyList, definition_ids: List[int]) -> int:
    existing = {w.definition_id for w in vocab_list.words}
    next_index = max((w.order_index for w in vocab_list.words), default=-1) + 1
    added = 0
    for def_id in definition_ids:
        if def_id in existing:
            continue
        vocab_list.words.append(ListWord(definition_id=def_id, order_index=next_index))
        existing.add(def_id)
        next_index += 1
        added += 1
    vocab_list.word_count = len(existing)
    vocab_list.last_modified = datetime.utcnow()
    return added


def create_list(db: Session, data: dict) -> VocabularyList:
    definition_ids = data.pop("definition_ids", [])
    vocab_list = VocabularyList(**data)
    db.add(vocab_list)
    _append_definitions(db, vocab_list, definition_ids)
    db.commit()
    db.refresh(vocab_list)
    logger.info("Created list %s with %d words", vocab_list.id, vocab_list.word_count)
    return vocab_list


def update_list(db: Session, vocab_list: VocabularyList, data: dict) -> VocabularyList:
    for key, value in data.items():
        setattr(vocab_list, key, value)
    vocab_list.last_modified = datetime.utcnow()
    db.commit()
    db.refresh(vocab_list)
    return vocab_list


def add_words_to_list(db: Session, vocab_list: VocabularyList, definition_ids: List[int]) -> int:
    added = _append_definitions(db, vocab_list, definition_ids)
    db.commit()
    db.refresh(vocab_list)
    return added


def soft_delete_list(db: Session, vocab_list: VocabularyList) -> VocabularyList:
    vocab_list.deleted_at = datetime.utcnow()
    db.commit()
    db.refresh(vocab_list)
    return vocab_list


def restore_list(db: Session, vocab_list: VocabularyList) -> VocabularyList:
    vocab_list.deleted_at = None
    db.commit()
    db.refresh(vocab_list)
    return vocab_list
