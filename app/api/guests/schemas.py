from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class GuestCreate(BaseModel):
    usn: str
    full_name: str
    phone_number: str
    purpose: str

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator('usn', 'full_name', 'phone_number', 'purpose')
    @classmethod
    def required(cls, value: str) -> str:
        if not value:
            raise ValueError('Please fill in all fields')
        return value


class Guest(BaseModel):
    id: int
    usn: str
    full_name: str
    phone_number: str
    purpose: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class GuestRow(Guest):
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    duration: str
