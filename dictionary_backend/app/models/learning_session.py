# dictionary_backend/app/models/learning_session.py
from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Column, Integer, String, Boolean, Float, DateTime, ForeignKey, Index,
)
from sqlalchemy.orm import relationship

from dictionary_backend.app.core.database import Base
from dictionary_backend.app.models.enums import SessionType, enum_column_type


def _uuid() -> str:
    return str(uuid4())


class UserLearningSession(Base):
    __tablename__ = "user_learning_sessions"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    user_list_id = Column(String(36), ForeignKey("user_lists.id", ondelete="SET NULL"), nullable=True)
    list_id = Column(String(36), ForeignKey("lists.id", ondelete="SET NULL"), nullable=True)
    session_type = Column(enum_column_type(SessionType), nullable=False)

    start_time = Column(DateTime, nullable=False, default=datetime.utcnow)
    end_time = Column(DateTime, nullable=True)      # 为空表示会话仍在进行
    duration = Column(Integer, nullable=True)       # 秒

    words_studied = Column(Integer, nullable=False, default=0)
    words_learned = Column(Integer, nullable=False, default=0)
    correct_answers = Column(Integer, nullable=False, default=0)
    incorrect_answers = Column(Integer, nullable=False, default=0)
    score = Column(Float, nullable=True)
    completion_percentage = Column(Float, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="learning_sessions")
    user_list = relationship("UserList")
    list = relationship("VocabularyList")
    items = relationship(
        "UserSessionItem",
        back_populates="session",
        order_by="UserSessionItem.created_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_sessions_user_created", "user_id", "created_at"),
    )


class UserSessionItem(Base):
    __tablename__ = "user_session_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    session_id = Column(
        String(36),
        ForeignKey("user_learning_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_dictionary_id = Column(
        String(36),
        ForeignKey("user_dictionary.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_correct = Column(Boolean, nullable=False, default=False)
    response_time = Column(Integer, nullable=True)   # 毫秒
    attempts_count = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)

    session = relationship("UserLearningSession", back_populates="items")
    user_dictionary = relationship("UserDictionary")
