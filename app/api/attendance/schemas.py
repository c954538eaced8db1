from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AttendanceType(str, Enum):
    MEMBER = 'member'
    GUEST = 'guest'


class AttendanceFilter(BaseModel):
    user_id: Optional[str] = None
    user_id_in: Optional[list[str]] = None
    type: Optional[AttendanceType] = None

    model_config = ConfigDict(use_enum_values=True)


class InternalAttendanceCreate(BaseModel):
    user_id: str
    type: AttendanceType
    check_in: datetime
    check_out: Optional[datetime] = None

    model_config = ConfigDict(use_enum_values=True)


class Attendance(BaseModel):
    id: int
    user_id: str
    type: AttendanceType
    check_in: datetime
    check_out: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AttendanceDetail(BaseModel):
    id: int
    check_in: datetime
    check_out: Optional[datetime] = None
    duration: str


class ActivityAction(str, Enum):
    CHECKED_IN = 'Checked In'
    CHECKED_OUT = 'Checked Out'


class RecentActivity(BaseModel):
    id: int
    name: str
    type: AttendanceType
    time: datetime
    action: ActivityAction
