# learning_backend/routes/stats_routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dictionary_backend.app.core.database import get_db
from dictionary_backend.app.models import User
from dictionary_backend.app.schemas.session import SessionStatsOut
from dictionary_backend.app.services import stats_service
from learning_backend.routes.auth_utils import get_current_user

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/overview")
def get_overview(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    overview = stats_service.get_overview(db, current_user)
    overview["sessions"] = SessionStatsOut.model_validate(overview["sessions"]).model_dump(mode="json")
    return overview
