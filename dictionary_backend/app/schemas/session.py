from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from dictionary_backend.app.models.enums import SessionType


class SessionCreate(BaseModel):
    session_type: SessionType
    user_list_id: Optional[str] = None
    list_id: Optional[str] = None


class SessionUpdate(BaseModel):
    end_time: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=0)
    words_studied: Optional[int] = Field(None, ge=0)
    words_learned: Optional[int] = Field(None, ge=0)
    correct_answers: Optional[int] = Field(None, ge=0)
    incorrect_answers: Optional[int] = Field(None, ge=0)
    score: Optional[float] = Field(None, ge=0)
    completion_percentage: Optional[float] = Field(None, ge=0, le=100)


class SessionItemCreate(BaseModel):
    user_dictionary_id: str
    is_correct: bool
    response_time: Optional[int] = Field(None, ge=0)
    attempts_count: int = Field(1, ge=1)


class SessionItemOut(BaseModel):
    id: str
    session_id: str
    user_dictionary_id: str
    is_correct: bool
    response_time: Optional[int] = None
    attempts_count: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SessionOut(BaseModel):
    id: str
    user_id: str
    user_list_id: Optional[str] = None
    list_id: Optional[str] = None
    session_type: SessionType
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[int] = None
    words_studied: int
    words_learned: int
    correct_answers: int
    incorrect_answers: int
    score: Optional[float] = None
    completion_percentage: float
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SessionDetailOut(SessionOut):
    items: List[SessionItemOut] = Field(default_factory=list)


class SessionHistoryOut(BaseModel):
    sessions: List[SessionOut]
    total: int
    page: int
    page_size: int
    has_next: bool
    has_prev: bool


class SessionStatsOut(BaseModel):
    total_sessions: int
    total_words_studied: int
    average_score: float
    streak_days: int
    last_session_date: Optional[datetime] = None
    recent_sessions: List[SessionOut] = Field(default_factory=list)
