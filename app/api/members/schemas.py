from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Club(str, Enum):
    SOSC = 'SOSC'
    CHALLENGERS = 'Challengers'
    SRC = 'SRC'


class MemberStatusFilter(str, Enum):
    ALL = 'all'
    ACTIVE = 'active'
    INACTIVE = 'inactive'


class MemberFilter(BaseModel):
    club: Optional[Club] = None
    id_in: Optional[list[str]] = None

    model_config = ConfigDict(use_enum_values=True)


class MemberCreate(BaseModel):
    usn: str = ''
    name: str = ''
    email: Optional[str] = ''
    phone: Optional[str] = ''

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator('email', 'phone')
    @classmethod
    def empty_if_missing(cls, value: Optional[str]) -> str:
        return value or ''


class InternalMemberCreate(MemberCreate):
    id: str
    club: Club
    joined_at: datetime

    model_config = ConfigDict(use_enum_values=True)


class Member(BaseModel):
    id: str
    usn: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    club: Club
    joined_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MemberRow(BaseModel):
    id: str
    name: str
    usn: str
    email: str
    phone: str
    club: Club
    total_check_ins: int
    total_hours: float
    last_check_in: Optional[datetime] = None
    is_active: bool
