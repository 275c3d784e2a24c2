# dictionary_backend/app/services/stats_service.py
from datetime import datetime
from typing import Any, Dict

from sqlalchemy.orm import Session

from dictionary_backend.app.models import User
from dictionary_backend.app.services import session_service, settings_service, user_dictionary_service


def get_overview(db: Session, user: User) -> Dict[str, Any]:
    """Session stats, dictionary stats and today's progress towards the daily goal."""
    settings = settings_service.get_or_create_user_settings(db, user)

    today_start = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    studied_today = session_service.words_studied_since(db, user.id, today_start)
    goal = settings.daily_goal or 1

    return {
        "sessions": session_service.get_session_stats(db, user.id),
        "dictionary": user_dictionary_service.get_stats(db, user.id),
        "today": {
            "words_studied": studied_today,
            "daily_goal": goal,
            "percentage": min(100, round(studied_today * 100 / goal)),
        },
    }
