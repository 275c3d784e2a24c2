# learning_backend/routes/session_routes.py
import logging
from typing import Optional

from dateutil import parser
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from dictionary_backend.app.core.database import get_db
from dictionary_backend.app.models import SessionType, User
from dictionary_backend.app.schemas.session import (
    SessionCreate,
    SessionDetailOut,
    SessionHistoryOut,
    SessionItemCreate,
    SessionItemOut,
    SessionOut,
    SessionStatsOut,
    SessionUpdate,
)
from dictionary_backend.app.services import session_service
from learning_backend.routes.auth_utils import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

NO_STORE = "no-cache, no-store, must-revalidate"


def _get_session_or_404(db: Session, user: User, session_id: str):
    try:
        return session_service.get_session(db, user.id, session_id)
    except session_service.SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")


def _parse_date(value: Optional[str], name: str):
    if not value:
        return None
    try:
        parsed = parser.isoparse(value)  # 解析时间
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
    return parsed


@router.post("", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
def create_session(
    payload: SessionCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    response.headers["Cache-Control"] = NO_STORE
    return session_service.create_learning_session(db, current_user.id, payload.model_dump())


@router.get("/current", response_model=Optional[SessionOut])
def get_current_session(
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    response.headers["Cache-Control"] = NO_STORE
    return session_service.get_current_session(db, current_user.id)


@router.get("/history", response_model=SessionHistoryOut)
def get_session_history(
    page: int = 1,
    page_size: int = 10,
    session_type: Optional[SessionType] = None,
    user_list_id: Optional[str] = None,
    list_id: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return session_service.get_session_history(
            db,
            current_user.id,
            page=page,
            page_size=page_size,
            session_type=session_type,
            user_list_id=user_list_id,
            list_id=list_id,
            start_date=_parse_date(start_date, "start_date"),
            end_date=_parse_date(end_date, "end_date"),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/stats", response_model=SessionStatsOut)
def get_session_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return session_service.get_session_stats(db, current_user.id)


@router.get("/{session_id}", response_model=SessionDetailOut)
def get_session(session_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_session_or_404(db, current_user, session_id)


@router.patch("/{session_id}", response_model=SessionOut)
def update_session(
    session_id: str,
    payload: SessionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    learning_session = _get_session_or_404(db, current_user, session_id)
    try:
        return session_service.update_learning_session(
            db, learning_session, payload.model_dump(exclude_unset=True)
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{session_id}/items", response_model=SessionItemOut, status_code=status.HTTP_201_CREATED)
def add_session_item(
    session_id: str,
    payload: SessionItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    learning_session = _get_session_or_404(db, current_user, session_id)
    try:
        return session_service.add_session_item(db, learning_session, payload.model_dump())
    except session_service.SessionNotFound:
        raise HTTPException(status_code=404, detail="Dictionary entry not found")
