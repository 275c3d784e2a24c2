# learning_backend/routes/practice_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from dictionary_backend.app.core.database import get_db
from dictionary_backend.app.models import User
from dictionary_backend.app.schemas.practice import (
    PracticeAnswer,
    PracticeAnswerResult,
    PracticeProgressOut,
    PracticeSessionCreate,
    PracticeSessionOut,
    PracticeSessionResult,
)
from dictionary_backend.app.schemas.session import SessionOut
from dictionary_backend.app.services import practice_service, session_service
from dictionary_backend.app.services.user_dictionary_service import EntryNotFound
from learning_backend.routes.auth_utils import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/practice", tags=["practice"])

NO_STORE = "no-cache, no-store, must-revalidate"


def _get_session_or_404(db: Session, user: User, session_id: str):
    try:
        return session_service.get_session(db, user.id, session_id)
    except session_service.SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")


@router.post("/sessions", response_model=PracticeSessionOut, status_code=status.HTTP_201_CREATED)
def start_practice(
    payload: PracticeSessionCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    response.headers["Cache-Control"] = NO_STORE
    try:
        return practice_service.create_practice_session(db, current_user, payload.model_dump())
    except practice_service.PracticeListNotFound:
        raise HTTPException(status_code=404, detail="List not found")
    except practice_service.PracticeError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/sessions/{session_id}/answers", response_model=PracticeAnswerResult)
def submit_answer(
    session_id: str,
    payload: PracticeAnswer,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    learning_session = _get_session_or_404(db, current_user, session_id)
    try:
        return practice_service.submit_answer(db, learning_session, payload.model_dump())
    except EntryNotFound:
        raise HTTPException(status_code=404, detail="Dictionary entry not found")
    except practice_service.PracticeError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/sessions/{session_id}/progress", response_model=PracticeProgressOut)
def practice_progress(session_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return practice_service.get_practice_progress(_get_session_or_404(db, current_user, session_id))


@router.post("/sessions/{session_id}/complete", response_model=PracticeSessionResult)
def complete_practice(session_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    learning_session = _get_session_or_404(db, current_user, session_id)
    try:
        return practice_service.complete_practice_session(db, learning_session)
    except practice_service.PracticeError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/sessions/{session_id}/cancel", response_model=SessionOut)
def cancel_practice(session_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    learning_session = _get_session_or_404(db, current_user, session_id)
    try:
        return practice_service.cancel_practice_session(db, learning_session)
    except practice_service.PracticeError as e:
        raise HTTPException(status_code=400, detail=str(e))
