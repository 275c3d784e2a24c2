# learning_backend/routes/user_list_routes.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from dictionary_backend.app.core.database import get_db
from dictionary_backend.app.models import User
from dictionary_backend.app.schemas.dictionary import ListOut
from dictionary_backend.app.schemas.user_dictionary import (
    UserDictionaryOut,
    UserListCreate,
    UserListOut,
    UserListUpdate,
    UserListWordAdd,
)
from dictionary_backend.app.services import user_dictionary_service, user_list_service
from dictionary_backend.app.services.user_service import UserService
from learning_backend.routes.auth_utils import get_current_user

router = APIRouter(prefix="/lists", tags=["user-lists"])


def _list_or_404(db: Session, user: User, user_list_id: str):
    try:
        return user_list_service.get_user_list(db, user.id, user_list_id)
    except user_list_service.ListNotFound:
        raise HTTPException(status_code=404, detail="List not found")


def _out(user_list) -> UserListOut:
    return UserListOut.model_validate(user_list)


@router.get("", response_model=List[UserListOut])
def my_lists(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return [_out(ul) for ul in UserService.get_user_lists(db, current_user.id)]


@router.get("/public", response_model=List[ListOut])
def available_public_lists(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return user_list_service.get_available_public_lists(db, current_user)


@router.post("/public/{list_id}", response_model=UserListOut, status_code=status.HTTP_201_CREATED)
def add_public_list(list_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    try:
        return _out(user_list_service.add_public_list(db, current_user, list_id))
    except user_list_service.ListNotFound:
        raise HTTPException(status_code=404, detail="List not found")


@router.post("", response_model=UserListOut, status_code=status.HTTP_201_CREATED)
def create_list(
    payload: UserListCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _out(user_list_service.create_custom_list(db, current_user, payload.model_dump()))


@router.patch("/{user_list_id}", response_model=UserListOut)
def update_list(
    user_list_id: str,
    payload: UserListUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_list = _list_or_404(db, current_user, user_list_id)
    return _out(user_list_service.update_user_list(db, user_list, payload.model_dump(exclude_unset=True)))


@router.delete("/{user_list_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_list(user_list_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    user_list = _list_or_404(db, current_user, user_list_id)
    user_list_service.remove_user_list(db, user_list)
    return None


@router.get("/{user_list_id}/words", response_model=List[UserDictionaryOut])
def list_words(user_list_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    user_list = _list_or_404(db, current_user, user_list_id)
    return user_list_service.get_list_words(db, user_list)


@router.post("/{user_list_id}/words", status_code=status.HTTP_201_CREATED)
def add_word(
    user_list_id: str,
    payload: UserListWordAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_list = _list_or_404(db, current_user, user_list_id)
    try:
        link = user_list_service.add_word(db, user_list, payload.user_dictionary_id)
    except user_dictionary_service.EntryNotFound:
        raise HTTPException(status_code=404, detail="Dictionary entry not found")
    return {"added": link is not None, "word_count": len(user_list.words)}


@router.delete("/{user_list_id}/words/{user_dictionary_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_word(
    user_list_id: str,
    user_dictionary_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_list = _list_or_404(db, current_user, user_list_id)
    if not user_list_service.remove_word(db, user_list, user_dictionary_id):
        raise HTTPException(status_code=404, detail="Word is not in this list")
    return None
