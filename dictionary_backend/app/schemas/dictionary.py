from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from dictionary_backend.app.models.enums import (
    DifficultyLevel,
    Gender,
    LanguageCode,
    PartOfSpeech,
    SourceType,
)


# -----------------------------
# 录入单词（数据导入）
# -----------------------------
class ExampleIn(BaseModel):
    example: str = Field(..., min_length=1)
    grammatical_note: Optional[str] = Field(None, max_length=255)
    source: Optional[str] = Field(None, max_length=255)
    language_code: Optional[LanguageCode] = None


class WordEntryCreate(BaseModel):
    word: str = Field(..., min_length=1, max_length=255)
    language_code: LanguageCode
    part_of_speech: PartOfSpeech
    definition: str = Field(..., min_length=1)
    definition_language_code: Optional[LanguageCode] = None
    source: SourceType = SourceType.admin
    phonetic: Optional[str] = Field(None, max_length=100)
    variant: Optional[str] = Field(None, max_length=100)
    gender: Optional[Gender] = None
    forms: Optional[str] = Field(None, max_length=100)
    frequency: Optional[int] = None
    is_plural: bool = False
    etymology: Optional[str] = None
    is_primary: bool = True
    examples: List[ExampleIn] = Field(default_factory=list)
    add_to_user_dictionary: bool = False


class WordEntryCreated(BaseModel):
    word_id: int
    word_details_id: int
    definition_id: int
    example_ids: List[int]
    user_dictionary_id: Optional[str] = None


# -----------------------------
# 管理端：单词 / 释义 / 例句 / 音频
# -----------------------------
class WordUpdate(BaseModel):
    word: Optional[str] = Field(None, min_length=1, max_length=255)
    phonetic_general: Optional[str] = Field(None, max_length=100)
    frequency_general: Optional[int] = None
    is_highlighted: Optional[bool] = None
    etymology: Optional[str] = None


class DefinitionUpdate(BaseModel):
    definition: Optional[str] = Field(None, min_length=1)
    subject_status_labels: Optional[str] = Field(None, max_length=255)
    general_labels: Optional[str] = Field(None, max_length=255)
    grammatical_note: Optional[str] = Field(None, max_length=255)
    usage_note: Optional[str] = Field(None, max_length=255)
    is_in_short_def: Optional[bool] = None


class AudioAttach(BaseModel):
    url: str = Field(..., min_length=1, max_length=255)
    source: SourceType = SourceType.admin
    language_code: LanguageCode
    is_primary: bool = False


class WordListItem(BaseModel):
    id: int
    word: str
    language_code: LanguageCode
    phonetic_general: Optional[str] = None
    frequency_general: Optional[int] = None
    is_highlighted: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WordPage(BaseModel):
    words: List[WordListItem]
    total: int
    page: int
    page_size: int


# -----------------------------
# 分类 / 词表
# -----------------------------
class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class CategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


class ListCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: int
    base_language_code: LanguageCode
    target_language_code: LanguageCode
    is_public: bool = False
    tags: List[str] = Field(default_factory=list)
    cover_image_url: Optional[str] = Field(None, max_length=255)
    difficulty_level: DifficultyLevel = DifficultyLevel.beginner
    definition_ids: List[int] = Field(default_factory=list)


class ListUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: Optional[int] = None
    is_public: Optional[bool] = None
    tags: Optional[List[str]] = None
    cover_image_url: Optional[str] = Field(None, max_length=255)
    difficulty_level: Optional[DifficultyLevel] = None


class ListWordsAdd(BaseModel):
    definition_ids: List[int] = Field(..., min_length=1)


class ListOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category_id: int
    base_language_code: LanguageCode
    target_language_code: LanguageCode
    is_public: bool
    tags: List[str]
    cover_image_url: Optional[str] = None
    difficulty_level: DifficultyLevel
    word_count: int
    created_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    class Config:
        from_attributes = True
