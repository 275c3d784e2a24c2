# dictionary_backend/app/models/user_dictionary.py
from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Float, DateTime, ForeignKey,
    UniqueConstraint, Index,
)
from sqlalchemy.orm import relationship

from dictionary_backend.app.core.database import Base
from dictionary_backend.app.models.enums import (
    DifficultyLevel,
    JSONType,
    LanguageCode,
    LearningStatus,
    enum_column_type,
)


class UserDictionary(Base):
    """一个用户收藏的一条释义，以及它的学习进度"""
    __tablename__ = "user_dictionary"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    definition_id = Column(Integer, ForeignKey("definitions.id", ondelete="CASCADE"), nullable=False)
    base_language_code = Column(enum_column_type(LanguageCode), nullable=False)
    target_language_code = Column(enum_column_type(LanguageCode), nullable=False)

    # ==== 用户自定义内容 ====
    custom_definition_base = Column(Text)
    custom_definition_target = Column(Text)
    custom_phonetic = Column(String(100))
    custom_notes = Column(Text)
    custom_tags = Column(JSONType, nullable=False, default=list)
    custom_difficulty_level = Column(enum_column_type(DifficultyLevel), nullable=True)
    is_modified = Column(Boolean, nullable=False, default=False)
    is_favorite = Column(Boolean, nullable=False, default=False)

    # ==== 学习进度 ====
    learning_status = Column(
        enum_column_type(LearningStatus),
        nullable=False,
        default=LearningStatus.notStarted,
    )
    last_reviewed_at = Column(DateTime)
    review_count = Column(Integer, nullable=False, default=0)
    time_word_was_started_to_learn = Column(DateTime)
    time_word_was_learned = Column(DateTime)
    next_review_due = Column(DateTime)
    progress = Column(Float, nullable=False, default=0)
    amount_of_mistakes = Column(Integer, nullable=False, default=0)
    correct_streak = Column(Integer, nullable=False, default=0)
    mastery_score = Column(Float, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="dictionary_entries")
    definition = relationship("Definition")

    __table_args__ = (
        UniqueConstraint("user_id", "definition_id", name="uq_user_definition"),
        Index("ix_user_dictionary_user_status", "user_id", "learning_status"),
    )
