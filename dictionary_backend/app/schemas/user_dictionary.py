from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from dictionary_backend.app.models.enums import DifficultyLevel, LanguageCode, LearningStatus


class UserDictionaryAdd(BaseModel):
    definition_id: int
    base_language_code: Optional[LanguageCode] = None
    target_language_code: Optional[LanguageCode] = None


class LearningStatusUpdate(BaseModel):
    learning_status: LearningStatus
    progress: Optional[float] = Field(None, ge=0, le=100)
    mastery_score: Optional[float] = Field(None, ge=0, le=100)
    next_review_due: Optional[datetime] = None


class CustomDataUpdate(BaseModel):
    custom_definition_base: Optional[str] = None
    custom_definition_target: Optional[str] = None
    custom_phonetic: Optional[str] = Field(None, max_length=100)
    custom_notes: Optional[str] = None
    custom_tags: Optional[List[str]] = None
    custom_difficulty_level: Optional[DifficultyLevel] = None


class UserDictionaryOut(BaseModel):
    id: str
    user_id: str
    definition_id: int
    base_language_code: LanguageCode
    target_language_code: LanguageCode
    custom_definition_base: Optional[str] = None
    custom_definition_target: Optional[str] = None
    custom_phonetic: Optional[str] = None
    custom_notes: Optional[str] = None
    custom_tags: List[str] = Field(default_factory=list)
    custom_difficulty_level: Optional[DifficultyLevel] = None
    is_modified: bool
    is_favorite: bool
    learning_status: LearningStatus
    last_reviewed_at: Optional[datetime] = None
    review_count: int
    time_word_was_started_to_learn: Optional[datetime] = None
    time_word_was_learned: Optional[datetime] = None
    next_review_due: Optional[datetime] = None
    progress: float
    amount_of_mistakes: int
    correct_streak: int
    mastery_score: float
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserDictionaryPage(BaseModel):
    entries: List[UserDictionaryOut]
    total: int
    page: int
    page_size: int


class UserDictionaryStats(BaseModel):
    total_words: int
    favorites: int
    needs_review: int
    average_mastery: float
    by_status: Dict[str, int]


# -----------------------------
# 用户词表
# -----------------------------
class UserListCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    base_language_code: LanguageCode
    target_language_code: LanguageCode
    difficulty: Optional[DifficultyLevel] = None
    cover_image_url: Optional[str] = Field(None, max_length=255)


class UserListUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    difficulty: Optional[DifficultyLevel] = None
    cover_image_url: Optional[str] = Field(None, max_length=255)
    progress: Optional[float] = Field(None, ge=0, le=100)


class UserListWordAdd(BaseModel):
    user_dictionary_id: str


class UserListOut(BaseModel):
    id: str
    user_id: str
    list_id: Optional[str] = None
    display_name: str
    custom_description_of_list: Optional[str] = None
    custom_cover_image_url: Optional[str] = None
    custom_difficulty: Optional[DifficultyLevel] = None
    base_language_code: LanguageCode
    target_language_code: LanguageCode
    is_modified: bool
    progress: float
    word_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
