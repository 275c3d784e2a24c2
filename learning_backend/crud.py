from sqlalchemy.orm import Session

from dictionary_backend.app.models import User
from dictionary_backend.app.services.user_service import UserService


def get_user_by_email(db: Session, email: str):
    return UserService.get_user_by_email(db, email)


def create_user(db: Session, email: str, password: str, name: str = None,
                base_language_code=None, target_language_code=None) -> User:
    return UserService.create_user(
        db,
        email=email,
        password=password,
        name=name,
        base_language_code=base_language_code,
        target_language_code=target_language_code,
    )
