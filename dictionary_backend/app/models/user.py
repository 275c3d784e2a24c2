# dictionary_backend/app/models/user.py
from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from dictionary_backend.app.core.database import Base
from dictionary_backend.app.models.enums import (
    JSONType,
    LanguageCode,
    UserRole,
    enum_column_type,
)


def _uuid() -> str:
    return str(uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)

    base_language_code = Column(enum_column_type(LanguageCode), nullable=False)
    target_language_code = Column(enum_column_type(LanguageCode), nullable=False)

    role = Column(enum_column_type(UserRole), nullable=False, default=UserRole.user)
    status = Column(String(255), nullable=False, default="active")
    is_verified = Column(Boolean, nullable=False, default=False)
    profile_picture_url = Column(String(255))

    # 前端 UI 偏好 / 学习偏好，原样保存 JSON 文档
    settings = Column(JSONType, nullable=False, default=dict)
    study_preferences = Column(JSONType, nullable=False, default=dict)

    last_login = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    user_settings = relationship(
        "UserSettings",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    dictionary_entries = relationship(
        "UserDictionary",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    user_lists = relationship(
        "UserList",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    learning_sessions = relationship(
        "UserLearningSession",
        order_by="UserLearningSession.created_at",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin


class UserSettings(Base):
    __tablename__ = "user_settings"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    daily_goal = Column(Integer, nullable=False, default=5)
    notifications_enabled = Column(Boolean, nullable=False, default=True)
    sound_enabled = Column(Boolean, nullable=False, default=True)
    auto_play_audio = Column(Boolean, nullable=False, default=True)
    dark_mode = Column(Boolean, nullable=False, default=False)
    learning_reminders = Column(JSONType, nullable=False, default=dict)
    session_duration = Column(Integer, nullable=False, default=15)   # 分钟
    review_interval = Column(Integer, nullable=False, default=3)     # 天
    difficulty_preference = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="user_settings")
