# dictionary_backend/app/services/user_service.py
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from passlib.context import CryptContext
from sqlalchemy import func
from sqlalchemy.orm import Session

from dictionary_backend.app.models import (
    LanguageCode,
    User,
    UserDictionary,
    UserList,
    UserSettings,
)

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ADMIN_UPDATABLE_FIELDS = (
    "name",
    "role",
    "status",
    "is_verified",
    "base_language_code",
    "target_language_code",
)


class UserService:
    """用户相关的查询 / 修改，路由层只负责鉴权和把异常转成 HTTP 响应"""

    @staticmethod
    def get_user_by_id(db: Session, user_id: str, include_deleted: bool = False) -> Optional[User]:
        query = db.query(User).filter(User.id == user_id)
        if not include_deleted:
            query = query.filter(User.deleted_at.is_(None))
        return query.first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(func.lower(User.email) == email.lower()).first()

    @staticmethod
    def get_users(db: Session, page: int = 1, page_size: int = 20) -> Tuple[List[User], int]:
        query = db.query(User).filter(User.deleted_at.is_(None))
        total = query.count()
        users = (
            query.order_by(User.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return users, total

    @staticmethod
    def create_user(
        db: Session,
        email: str,
        password: str,
        name: Optional[str] = None,
        base_language_code=None,
        target_language_code=None,
        role=None,
    ) -> User:
        """Hash the password, store the user and its default settings row."""
        user = User(
            email=email.lower(),
            password=pwd_context.hash(password),
            name=name or email.split("@")[0],
            base_language_code=base_language_code or LanguageCode.en,
            target_language_code=target_language_code or LanguageCode.da,
        )
        if role is not None:
            user.role = role
        user.user_settings = UserSettings()
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Created user %s (%s)", user.id, user.email)
        return user

    @staticmethod
    def update_user(db: Session, user: User, data: dict) -> User:
        for field in ADMIN_UPDATABLE_FIELDS:
            if field in data and data[field] is not None:
                setattr(user, field, data[field])
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_profile(db: Session, user: User, data: dict) -> User:
        email = data.get("email")
        if email and email.lower() != user.email:
            taken = (
                db.query(User.id)
                .filter(func.lower(User.email) == email.lower(), User.id != user.id)
                .first()
            )
            if taken:
                raise ValueError("Email already exists.")
            user.email = email.lower()

        for field in ("name", "base_language_code", "target_language_code", "profile_picture_url"):
            if data.get(field) is not None:
                setattr(user, field, data[field])
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user: User) -> User:
        user.deleted_at = datetime.utcnow()
        user.status = "deleted"
        db.commit()
        db.refresh(user)
        logger.info("Soft deleted user %s", user.id)
        return user

    @staticmethod
    def get_user_dictionary(
        db: Session, user_id: str, page: int = 1, page_size: int = 20
    ) -> Tuple[List[UserDictionary], int]:
        query = db.query(UserDictionary).filter(
            UserDictionary.user_id == user_id,
            UserDictionary.deleted_at.is_(None),
        )
        total = query.count()
        entries = (
            query.order_by(UserDictionary.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return entries, total

    @staticmethod
    def get_user_lists(db: Session, user_id: str) -> List[UserList]:
        return (
            db.query(UserList)
            .filter(UserList.user_id == user_id, UserList.deleted_at.is_(None))
            .order_by(UserList.created_at.desc())
            .all()
        )

    @staticmethod
    def touch_last_login(db: Session, user: User) -> None:
        user.last_login = datetime.utcnow()
        db.commit()
        db.refresh(user)
