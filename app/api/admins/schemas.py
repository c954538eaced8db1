from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.api.members.schemas import Club


class AdminLogin(BaseModel):
    email: str = ''
    password: str = ''

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class AdminCreate(BaseModel):
    email: str
    name: str
    club: Club
    password: str

    model_config = ConfigDict(use_enum_values=True)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower().strip()


class AdminSession(BaseModel):
    uid: int
    email: str
    name: str
    club: Club


class AdminAuthorization(BaseModel):
    access_token: str
    token_type: str
    admin: AdminSession


class NameUpdate(BaseModel):
    name: Optional[str] = ''

    model_config = ConfigDict(str_strip_whitespace=True)


class PasswordChange(BaseModel):
    current_password: str = ''
    new_password: str = ''
    confirm_password: str = ''


class Message(BaseModel):
    message: str
