# dictionary_backend/app/api/dictionary.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from dictionary_backend.app.core.database import get_db
from dictionary_backend.app.models import User
from dictionary_backend.app.schemas.dictionary import WordEntryCreate, WordEntryCreated
from dictionary_backend.app.services import dictionary_service
from learning_backend.routes.auth_utils import get_current_user

router = APIRouter()


@router.post("/words", response_model=WordEntryCreated, status_code=status.HTTP_201_CREATED)
def add_word(
    payload: WordEntryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """录入一个单词 + 释义 + 例句；可选同时加入自己的词典"""
    return dictionary_service.add_word_entry(db, payload, user=current_user)
