from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.api.attendance.schemas import AttendanceType


class SessionStatus(str, Enum):
    NONE = 'none'
    ACTIVE = 'active'
    CLOSED = 'closed'


class SessionData(BaseModel):
    attendance_id: int
    user_id: str
    type: AttendanceType
    check_in_time: datetime
    user_name: Optional[str] = None


class NewCheckIn(BaseModel):
    usn: str

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator('usn')
    def validate_usn(cls, v):
        if not v:
            raise ValueError('USN is required')
        return v


class CheckInResponse(BaseModel):
    success: bool
    guest_registration_required: bool = False
    session: Optional[SessionData] = None
    token: Optional[str] = None


class SessionStatusResponse(BaseModel):
    status: SessionStatus
    session: SessionData


class CheckOutResponse(BaseModel):
    status: SessionStatus
    session: SessionData
    check_out_time: datetime
    duration_minutes: int
