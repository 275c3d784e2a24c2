# dictionary_backend/app/api/cleanup.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dictionary_backend.app.core.database import get_db
from dictionary_backend.app.services.cleanup_service import CleanupService
from learning_backend.routes.auth_utils import get_current_admin_user

router = APIRouter(dependencies=[Depends(get_current_admin_user)])


@router.post("/audio")
def run_audio_cleanup(db: Session = Depends(get_db)):
    deleted = CleanupService.get_instance().run_audio_cleanup(db)
    return {"deleted_audio": deleted}


@router.post("/run-all")
def run_all_cleanup(db: Session = Depends(get_db)):
    return {"results": CleanupService.get_instance().run_all(db)}
