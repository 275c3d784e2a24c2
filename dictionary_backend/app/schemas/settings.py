from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class UserSettingsOut(BaseModel):
    id: str
    user_id: str
    daily_goal: int
    notifications_enabled: bool
    sound_enabled: bool
    auto_play_audio: bool
    dark_mode: bool
    learning_reminders: Dict[str, Any]
    session_duration: int
    review_interval: int
    difficulty_preference: int
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserSettingsUpdate(BaseModel):
    daily_goal: Optional[int] = Field(None, ge=1, le=100)
    notifications_enabled: Optional[bool] = None
    sound_enabled: Optional[bool] = None
    auto_play_audio: Optional[bool] = None
    dark_mode: Optional[bool] = None
    learning_reminders: Optional[Dict[str, Any]] = None
    session_duration: Optional[int] = Field(None, ge=5, le=120)
    review_interval: Optional[int] = Field(None, ge=1, le=30)
    difficulty_preference: Optional[int] = Field(None, ge=1, le=5)


class SettingsSyncRequest(BaseModel):
    user_id: str
    settings: Dict[str, Any] = Field(default_factory=dict)
    study_preferences: Dict[str, Any] = Field(default_factory=dict)


class SettingsBundleOut(BaseModel):
    settings: Dict[str, Any]
    study_preferences: Dict[str, Any]
    user_settings: UserSettingsOut
