# learning_backend/routes/user_routes.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from dictionary_backend.app.core.database import get_db
from dictionary_backend.app.models import User
from dictionary_backend.app.schemas.auth import (
    AdminUserCreate,
    AdminUserUpdate,
    ProfileUpdate,
    UserOut,
    UserPage,
)
from dictionary_backend.app.schemas.user_dictionary import UserDictionaryPage, UserListOut
from dictionary_backend.app.services.user_service import UserService
from learning_backend.routes.auth_utils import get_current_admin_user, get_current_user

router = APIRouter(prefix="/users", tags=["users"])


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = UserService.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# -------------------- 当前用户 --------------------
@router.patch("/me/profile", response_model=UserOut)
def update_my_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return UserService.update_profile(db, current_user, payload.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# -------------------- 管理员 --------------------
@router.get("", response_model=UserPage)
def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_admin_user),
):
    users, total = UserService.get_users(db, page, page_size)
    return {"users": users, "total": total, "page": page, "page_size": page_size}


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: AdminUserCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_admin_user),
):
    if UserService.get_user_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="User with this email already exists")
    return UserService.create_user(db, **payload.model_dump())


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, db: Session = Depends(get_db), current_user=Depends(get_current_admin_user)):
    return _get_user_or_404(db, user_id)


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    payload: AdminUserUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_admin_user),
):
    user = _get_user_or_404(db, user_id)
    return UserService.update_user(db, user, payload.model_dump(exclude_unset=True))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, db: Session = Depends(get_db), current_user=Depends(get_current_admin_user)):
    user = _get_user_or_404(db, user_id)
    UserService.delete_user(db, user)
    return None


@router.get("/{user_id}/dictionary", response_model=UserDictionaryPage)
def get_user_dictionary(
    user_id: str,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_admin_user),
):
    _get_user_or_404(db, user_id)
    entries, total = UserService.get_user_dictionary(db, user_id, page, page_size)
    return {"entries": entries, "total": total, "page": page, "page_size": page_size}


@router.get("/{user_id}/lists", response_model=List[UserListOut])
def get_user_lists(user_id: str, db: Session = Depends(get_db), current_user=Depends(get_current_admin_user)):
    _get_user_or_404(db, user_id)
    return [UserListOut.model_validate(ul) for ul in UserService.get_user_lists(db, user_id)]
