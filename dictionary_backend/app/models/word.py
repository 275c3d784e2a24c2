# dictionary_backend/app/models/word.py
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from dictionary_backend.app.core.database import Base
from dictionary_backend.app.models.enums import (
    Gender,
    LanguageCode,
    PartOfSpeech,
    SourceType,
    enum_column_type,
)


class Word(Base):
    __tablename__ = "words"

    id = Column(Integer, primary_key=True)
    word = Column(String(255), nullable=False, index=True)
    phonetic_general = Column(String(100))
    frequency_general = Column(Integer)
    is_highlighted = Column(Boolean, nullable=False, default=False)
    etymology = Column(Text)
    language_code = Column(enum_column_type(LanguageCode), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    details = relationship(
        "WordDetails",
        back_populates="word",
        order_by="WordDetails.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("word", "language_code", name="uq_word_language"),
    )


class WordDetails(Base):
    __tablename__ = "word_details"

    id = Column(Integer, primary_key=True)
    word_id = Column(
        Integer,
        ForeignKey("words.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    part_of_speech = Column(enum_column_type(PartOfSpeech), nullable=False)
    variant = Column(String(100))
    gender = Column(enum_column_type(Gender), nullable=True)
    phonetic = Column(String(100))
    forms = Column(String(100))
    frequency = Column(Integer)
    is_plural = Column(Boolean, nullable=False, default=False)
    source = Column(enum_column_type(SourceType), nullable=False)

    word = relationship("Word", back_populates="details")
    definitions = relationship(
        "WordDefinition",
        back_populates="word_details",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    audio_links = relationship(
        "WordDetailsAudio",
        back_populates="word_details",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Image(Base):
    __tablename__ = "images"

    id = Column(Integer, primary_key=True)
    url = Column(String(255), unique=True, nullable=False)
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    definitions = relationship("Definition", back_populates="image")


class Definition(Base):
    __tablename__ = "definitions"

    id = Column(Integer, primary_key=True)
    definition = Column(Text, nullable=False)
    image_id = Column(Integer, ForeignKey("images.id", ondelete="SET NULL"), nullable=True)
    source = Column(enum_column_type(SourceType), nullable=False)
    language_code = Column(enum_column_type(LanguageCode), nullable=False)
    subject_status_labels = Column(String(255))
    general_labels = Column(String(255))
    grammatical_note = Column(String(255))
    usage_note = Column(String(255))
    is_in_short_def = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    image = relationship("Image", back_populates="definitions")
    word_details = relationship(
        "WordDefinition",
        back_populates="definition",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    examples = relationship(
        "DefinitionExample",
        back_populates="definition",
        order_by="DefinitionExample.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    audio_links = relationship(
        "DefinitionAudio",
        back_populates="definition",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class DefinitionExample(Base):
    __tablename__ = "definition_examples"

    id = Column(Integer, primary_key=True)
    example = Column(Text, nullable=False)
    grammatical_note = Column(String(255))
    source = Column(String(255))
    language_code = Column(enum_column_type(LanguageCode), nullable=False)
    definition_id = Column(
        Integer,
        ForeignKey("definitions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    definition = relationship("Definition", back_populates="examples")
    audio_links = relationship(
        "ExampleAudio",
        back_populates="example",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class WordDefinition(Base):
    __tablename__ = "word_definitions"

    word_details_id = Column(
        Integer,
        ForeignKey("word_details.id", ondelete="CASCADE"),
        primary_key=True,
    )
    definition_id = Column(
        Integer,
        ForeignKey("definitions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    is_primary = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    word_details = relationship("WordDetails", back_populates="definitions")
    definition = relationship("Definition", back_populates="word_details")


# ============================================================
# 音频：audio 表本身 + 三张关联表
# ============================================================
class Audio(Base):
    __tablename__ = "audio"

    id = Column(Integer, primary_key=True)
    url = Column(String(255), nullable=False)
    source = Column(enum_column_type(SourceType), nullable=False)
    language_code = Column(enum_column_type(LanguageCode), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class WordDetailsAudio(Base):
    __tablename__ = "word_details_audio"

    word_details_id = Column(
        Integer,
        ForeignKey("word_details.id", ondelete="CASCADE"),
        primary_key=True,
    )
    audio_id = Column(
        Integer,
        ForeignKey("audio.id", ondelete="CASCADE"),
        primary_key=True,
    )
    is_primary = Column(Boolean, nullable=False, default=False)

    word_details = relationship("WordDetails", back_populates="audio_links")
    audio = relationship("Audio")


class DefinitionAudio(Base):
    __tablename__ = "definition_audio"

    definition_id = Column(
        Integer,
        ForeignKey("definitions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    audio_id = Column(
        Integer,
        ForeignKey("audio.id", ondelete="CASCADE"),
        primary_key=True,
    )
    is_primary = Column(Boolean, nullable=False, default=False)

    definition = relationship("Definition", back_populates="audio_links")
    audio = relationship("Audio")


class ExampleAudio(Base):
    __tablename__ = "example_audio"

    example_id = Column(
        Integer,
        ForeignKey("definition_examples.id", ondelete="CASCADE"),
        primary_key=True,
    )
    audio_id = Column(
        Integer,
        ForeignKey("audio.id", ondelete="CASCADE"),
        primary_key=True,
    )
    is_primary = Column(Boolean, nullable=False, default=False)

    example = relationship("DefinitionExample", back_populates="audio_links")
    audio = relationship("Audio")
