from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from dictionary_backend.app.models.enums import LanguageCode, UserRole

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    repeat_password: str
    base_language_code: LanguageCode = LanguageCode.en
    target_language_code: LanguageCode = LanguageCode.da
    name: Optional[str] = Field(None, min_length=2, max_length=100)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.repeat_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    email: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    status: str
    is_verified: bool
    base_language_code: LanguageCode
    target_language_code: LanguageCode
    profile_picture_url: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    access_token: str
    token_type: str
    user: UserOut


class AdminUserCreate(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=2, max_length=100)
    base_language_code: LanguageCode = LanguageCode.en
    target_language_code: LanguageCode = LanguageCode.da
    role: UserRole = UserRole.user


class AdminUserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    role: Optional[UserRole] = None
    status: Optional[str] = Field(None, max_length=50)
    is_verified: Optional[bool] = None
    base_language_code: Optional[LanguageCode] = None
    target_language_code: Optional[LanguageCode] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN, max_length=255)
    base_language_code: Optional[LanguageCode] = None
    target_language_code: Optional[LanguageCode] = None
    profile_picture_url: Optional[str] = Field(None, max_length=255)


class UserPage(BaseModel):
    users: list[UserOut]
    total: int
    page: int
    page_size: int
