import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from dictionary_backend.app.core.database import get_db
from dictionary_backend.app.models import User
from dictionary_backend.app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    Token,
    UserOut,
)
from dictionary_backend.app.services.user_service import UserService
from learning_backend.crud import create_user, get_user_by_email
from learning_backend.routes.auth_utils import get_current_user, token_for_user, verify_password

logger = logging.getLogger(__name__)

router = APIRouter()


# 用户注册接口
@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(user: RegisterRequest, db: Session = Depends(get_db)):
    existing_user = get_user_by_email(db, user.email)
    if existing_user:
        raise HTTPException(
            status_code=400,
            detail="User with this email already exists"
        )

    new_user = create_user(
        db,
        email=user.email,
        password=user.password,
        name=user.name,
        base_language_code=user.base_language_code,
        target_language_code=user.target_language_code,
    )
    return {"access_token": token_for_user(new_user), "token_type": "bearer"}


# 用户登录接口
@router.post("/login", response_model=LoginResponse)
def login(user: LoginRequest, db: Session = Depends(get_db)):
    db_user = get_user_by_email(db, user.email)
    if (
        not db_user
        or db_user.deleted_at is not None
        or not verify_password(user.password, db_user.password)
    ):
        logger.info("Failed login for %s", user.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    UserService.touch_last_login(db, db_user)
    return {
        "access_token": token_for_user(db_user),
        "token_type": "bearer",
        "user": db_user,
    }


@router.get("/me", response_model=UserOut)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user
