# learning_backend/routes/user_dictionary_routes.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from dictionary_backend.app.core.database import get_db
from dictionary_backend.app.models import LearningStatus, User
from dictionary_backend.app.schemas.user_dictionary import (
    CustomDataUpdate,
    LearningStatusUpdate,
    UserDictionaryAdd,
    UserDictionaryOut,
    UserDictionaryPage,
    UserDictionaryStats,
)
from dictionary_backend.app.services import user_dictionary_service as uds
from learning_backend.routes.auth_utils import get_current_user

router = APIRouter(prefix="/user-dictionary", tags=["user-dictionary"])


def _entry_or_404(db: Session, user: User, entry_id: str):
    try:
        return uds.get_entry(db, user.id, entry_id)
    except uds.EntryNotFound:
        raise HTTPException(status_code=404, detail="Dictionary entry not found")


@router.get("", response_model=UserDictionaryPage)
def list_entries(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    learning_status: Optional[LearningStatus] = None,
    favorites: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entries, total = uds.list_entries(
        db, current_user.id, page, page_size,
        learning_status=learning_status, favorites_only=favorites,
    )
    return {"entries": entries, "total": total, "page": page, "page_size": page_size}


@router.post("", response_model=UserDictionaryOut, status_code=status.HTTP_201_CREATED)
def add_entry(
    payload: UserDictionaryAdd,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        entry, created = uds.add_definition(
            db, current_user, payload.definition_id,
            payload.base_language_code, payload.target_language_code,
        )
    except uds.EntryNotFound:
        raise HTTPException(status_code=404, detail="Definition not found")
    if not created:
        response.status_code = status.HTTP_200_OK
    return entry


@router.get("/stats", response_model=UserDictionaryStats)
def get_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return uds.get_stats(db, current_user.id)


@router.get("/{entry_id}", response_model=UserDictionaryOut)
def get_entry(entry_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _entry_or_404(db, current_user, entry_id)


@router.patch("/{entry_id}/status", response_model=UserDictionaryOut)
def update_status(
    entry_id: str,
    payload: LearningStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = _entry_or_404(db, current_user, entry_id)
    return uds.update_learning_status(db, entry, payload.model_dump())


@router.post("/{entry_id}/favorite", response_model=UserDictionaryOut)
def toggle_favorite(entry_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    entry = _entry_or_404(db, current_user, entry_id)
    return uds.toggle_favorite(db, entry)


@router.patch("/{entry_id}/custom", response_model=UserDictionaryOut)
def update_custom(
    entry_id: str,
    payload: CustomDataUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = _entry_or_404(db, current_user, entry_id)
    return uds.update_custom_data(db, entry, payload.model_dump(exclude_unset=True))


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_entry(entry_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    entry = _entry_or_404(db, current_user, entry_id)
    uds.remove_entry(db, entry)
    return None
