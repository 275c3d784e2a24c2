# learning_backend/routes/settings_routes.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from dictionary_backend.app.core.database import get_db
from dictionary_backend.app.models import User
from dictionary_backend.app.schemas.settings import (
    SettingsBundleOut,
    SettingsSyncRequest,
    UserSettingsOut,
    UserSettingsUpdate,
)
from dictionary_backend.app.services import settings_service
from learning_backend.routes.auth_utils import get_current_user

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=UserSettingsOut)
def get_settings(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return settings_service.get_or_create_user_settings(db, current_user)


@router.put("", response_model=UserSettingsOut)
def update_settings(
    payload: UserSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return settings_service.update_user_settings(db, current_user, payload.model_dump(exclude_unset=True))


@router.get("/load", response_model=SettingsBundleOut)
def load_settings(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return settings_service.load_user_settings(db, current_user)


@router.post("/sync", response_model=SettingsBundleOut)
def sync_settings(
    payload: SettingsSyncRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if payload.user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")
    return settings_service.sync_user_settings(
        db, current_user, payload.settings, payload.study_preferences
    )
