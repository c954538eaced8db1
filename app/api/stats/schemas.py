from typing import List

from pydantic import BaseModel

from app.api.attendance.schemas import RecentActivity


class TopMember(BaseModel):
    name: str
    usn: str
    check_ins: int
    hours: float


class ClubStats(BaseModel):
    club: str
    total_members: int
    total_check_ins: int
    active_today: int
    active_now: int
    total_hours: float
    avg_hours_per_member: float
    top_members: List[TopMember]


class DashboardStats(BaseModel):
    total_members: int
    today_check_ins: int
    active_now: int
    total_guests: int
    recent_activity: List[RecentActivity]
