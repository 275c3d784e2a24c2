from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from dictionary_backend.app.models.enums import LearningStatus, PartOfSpeech
from dictionary_backend.app.schemas.session import SessionItemOut, SessionOut


class PracticeSessionCreate(BaseModel):
    list_id: Optional[str] = None
    user_list_id: Optional[str] = None
    difficulty: Optional[int] = Field(None, ge=1, le=3)
    words_to_study: int = Field(10, ge=1, le=50)
    due_only: bool = False


class PracticeWordOut(BaseModel):
    user_dictionary_id: str
    word_text: str
    definition: str
    learning_status: LearningStatus
    attempts: int
    correct_streak: int
    mastery_score: float
    part_of_speech: Optional[PartOfSpeech] = None
    phonetic: Optional[str] = None
    image_url: Optional[str] = None
    audio_url: Optional[str] = None
    options: List[str] = Field(default_factory=list)


class PracticeSessionOut(BaseModel):
    session: SessionOut
    words: List[PracticeWordOut]


class PracticeAnswer(BaseModel):
    user_dictionary_id: str
    answer_type: Literal["typing", "construction", "multiple_choice"] = "typing"
    user_input: str = Field("", max_length=255)
    response_time: int = Field(0, ge=0)   # 毫秒


class LetterDifference(BaseModel):
    position: int
    expected: str
    actual: str


class PracticeAnswerResult(BaseModel):
    is_correct: bool
    accuracy: int
    partial_credit: bool
    points_earned: int
    feedback: str
    correct_word: str
    differences: List[LetterDifference] = Field(default_factory=list)
    learning_status: LearningStatus
    mastery_score: float
    next_review_due: Optional[datetime] = None
    item: SessionItemOut


class PracticeProgressOut(BaseModel):
    words_studied: int
    correct_answers: int
    incorrect_answers: int
    accuracy: float
    words_learned: int
    time_elapsed: int
    current_score: int


class PracticeResultWord(BaseModel):
    user_dictionary_id: str
    word_text: str
    is_correct: bool
    response_time: int
    attempts: int


class PracticeSessionResult(BaseModel):
    session_id: str
    total_words: int
    correct_answers: int
    incorrect_answers: int
    accuracy: float
    total_time: int
    average_time: float
    session_score: float
    words_learned: int
    difficulty_score: float
    start_time: datetime
    end_time: datetime
    words: List[PracticeResultWord] = Field(default_factory=list)
