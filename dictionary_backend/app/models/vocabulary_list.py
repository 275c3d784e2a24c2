# dictionary_backend/app/models/vocabulary_list.py
from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Float, DateTime, ForeignKey,
)
from sqlalchemy.orm import relationship

from dictionary_backend.app.core.database import Base
from dictionary_backend.app.models.enums import (
    DifficultyLevel,
    JSONType,
    LanguageCode,
    enum_column_type,
)


def _uuid() -> str:
    return str(uuid4())


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    lists = relationship("VocabularyList", back_populates="category")


class VocabularyList(Base):
    """Admin curated word list (table ``lists``)."""
    __tablename__ = "lists"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    base_language_code = Column(enum_column_type(LanguageCode), nullable=False)
    target_language_code = Column(enum_column_type(LanguageCode), nullable=False)
    is_public = Column(Boolean, nullable=False, default=False)
    tags = Column(JSONType, nullable=False, default=list)
    cover_image_url = Column(String(255))
    difficulty_level = Column(enum_column_type(DifficultyLevel), nullable=False)
    word_count = Column(Integer, nullable=False, default=0)
    learned_word_count = Column(Integer, nullable=False, default=0)
    last_modified = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    category = relationship("Category", back_populates="lists")
    words = relationship(
        "ListWord",
        back_populates="list",
        order_by="ListWord.order_index",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ListWord(Base):
    __tablename__ = "list_words"

    list_id = Column(String(36), ForeignKey("lists.id", ondelete="CASCADE"), primary_key=True)
    definition_id = Column(Integer, ForeignKey("definitions.id", ondelete="CASCADE"), primary_key=True)
    order_index = Column(Integer, nullable=False)

    list = relationship("VocabularyList", back_populates="words")
    definition = relationship("Definition")


class UserList(Base):
    __tablename__ = "user_lists"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    list_id = Column(String(36), ForeignKey("lists.id", ondelete="SET NULL"), nullable=True)
    base_language_code = Column(enum_column_type(LanguageCode), nullable=False)
    target_language_code = Column(enum_column_type(LanguageCode), nullable=False)
    is_modified = Column(Boolean, nullable=False, default=False)
    custom_name_of_list = Column(String(255))
    custom_description_of_list = Column(String(1000))
    custom_cover_image_url = Column(String(255))
    custom_difficulty = Column(enum_column_type(DifficultyLevel), nullable=True)
    progress = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="user_lists")
    list = relationship("VocabularyList")
    words = relationship(
        "UserListWord",
        back_populates="user_list",
        order_by="UserListWord.order_index",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def display_name(self) -> str:
        if self.custom_name_of_list:
            return self.custom_name_of_list
        return self.list.name if self.list else ""

    @property
    def word_count(self) -> int:
        return len(self.words)


class UserListWord(Base):
    __tablename__ = "user_list_words"

    user_list_id = Column(String(36), ForeignKey("user_lists.id", ondelete="CASCADE"), primary_key=True)
    user_dictionary_id = Column(String(36), ForeignKey("user_dictionary.id", ondelete="CASCADE"), primary_key=True)
    order_index = Column(Integer, nullable=False)

    user_list = relationship("UserList", back_populates="words")
    user_dictionary = relationship("UserDictionary")
