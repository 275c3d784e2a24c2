# dictionary_backend/app/services/settings_service.py
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from dictionary_backend.app.models import User, UserSettings

logger = logging.getLogger(__name__)

# 前端 studyPreferences.learning 里的 key -> (列名, 期望类型)
LEARNING_PREF_FIELDS = {
    "dailyGoal": ("daily_goal", int),
    "notificationsEnabled": ("notifications_enabled", bool),
    "soundEnabled": ("sound_enabled", bool),
    "autoPlayAudio": ("auto_play_audio", bool),
    "darkMode": ("dark_mode", bool),
    "sessionDuration": ("session_duration", int),
    "reviewInterval": ("review_interval", int),
    "difficultyPreference": ("difficulty_preference", int),
    "learningReminders": ("learning_reminders", dict),
}

# 与 PUT /settings 的校验范围保持一致
LEARNING_PREF_RANGES = {
    "daily_goal": (1, 100),
    "session_duration": (5, 120),
    "review_interval": (1, 30),
    "difficulty_preference": (1, 5),
}


def _typed(value: Any, expected: type) -> bool:
    # bool 是 int 的子类，要单独排除
    if expected is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, expected)


def _acceptable(column: str, value: Any, expected: type) -> bool:
    if not _typed(value, expected):
        return False
    bounds = LEARNING_PREF_RANGES.get(column)
    if bounds and not bounds[0] <= value <= bounds[1]:
        logger.warning("Ignoring out-of-range %s=%r in synced settings", column, value)
        return False
    return True


def get_or_create_user_settings(db: Session, user: User) -> UserSettings:
    settings = db.query(UserSettings).filter(UserSettings.user_id == user.id).first()
    if settings is None:
        settings = UserSettings(user_id=user.id)
        db.add(settings)
        db.commit()
        db.refresh(settings)
        logger.info("Created default settings for user %s", user.id)
    return settings


def update_user_settings(db: Session, user: User, data: Dict[str, Any]) -> UserSettings:
    settings = get_or_create_user_settings(db, user)
    for key, value in data.items():
        if value is not None:
            setattr(settings, key, value)
    db.commit()
    db.refresh(settings)
    return settings


def load_user_settings(db: Session, user: User) -> Dict[str, Any]:
    return {
        "settings": user.settings or {},
        "study_preferences": user.study_preferences or {},
        "user_settings": get_or_create_user_settings(db, user),
    }


def extract_learning_fields(learning: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the known learning preferences with the right type and range."""
    fields = {}
    for key, (column, expected) in LEARNING_PREF_FIELDS.items():
        for candidate in (key, column):
            if candidate in learning and _acceptable(column, learning[candidate], expected):
                fields[column] = learning[candidate]
                break
    return fields


def sync_user_settings(
    db: Session,
    user: User,
    settings: Dict[str, Any],
    study_preferences: Dict[str, Any],
) -> Dict[str, Any]:
    user.settings = settings
    user.study_preferences = study_preferences

    learning = study_preferences.get("learning")
    if isinstance(learning, dict):
        fields = extract_learning_fields(learning)
        row = db.query(UserSettings).filter(UserSettings.user_id == user.id).first()
        if row is None:
            row = UserSettings(user_id=user.id)
            db.add(row)
        for column, value in fields.items():
            setattr(row, column, value)

    db.commit()
    db.refresh(user)
    logger.info("Synced settings for user %s", user.id)
    return load_user_settings(db, user)
