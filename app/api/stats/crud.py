from typing import List

from sqlalchemy.orm import Session

from app.api.attendance.crud import attendance as attendance_crud
from app.api.attendance.schemas import ActivityAction, AttendanceType, RecentActivity
from app.api.guests.crud import guest as guest_crud
from app.api.members.crud import member as member_crud
from app.api.members.schemas import Club
from app.core.config import settings
from app.core.exceptions.auth_exceptions import ClubAccessDenied
from app.core.logger import logger
from app.core.security import TokenData
from app.core.utils import start_of_today

from . import schemas
from .aggregation import compute_club_stats

RECENT_ACTIVITY_LIMIT = 10


def get_club_stats(db: Session, club: str) -> schemas.ClubStats:
    members = member_crud.find_by_club(db, club)
    records = attendance_crud.find_for_users(
        db, [m.id for m in members], AttendanceType.MEMBER
    )
    logger.info(
        'Computing stats for %s: %s members, %s records', club, len(members), len(records)
    )
    return compute_club_stats(club, members, records, start_of_today())


def get_all_club_stats(db: Session, user: TokenData) -> List[schemas.ClubStats]:
    if user.club != settings.PRIVILEGED_CLUB:
        logger.error(
            'Admin %s of %s requested stats for every club', user.admin_id, user.club
        )
        raise ClubAccessDenied(user.club)
    return [get_club_stats(db, club.value) for club in Club]


def get_dashboard(db: Session, user: TokenData) -> schemas.DashboardStats:
    members = member_crud.find(db, user=user)
    today_records = attendance_crud.find_for_users(
        db,
        [m.id for m in members],
        AttendanceType.MEMBER,
        since=start_of_today(),
    )

    recent_activity = [
        RecentActivity(
            id=r.id,
            name=r.user_id or 'Unknown',
            type=r.type or AttendanceType.MEMBER,
            time=r.check_in,
            action=ActivityAction.CHECKED_OUT
            if r.check_out
            else ActivityAction.CHECKED_IN,
        )
        for r in attendance_crud.find_recent(db, RECENT_ACTIVITY_LIMIT)
    ]

    return schemas.DashboardStats(
        total_members=len(members),
        today_check_ins=len(today_records),
        active_now=sum(1 for r in today_records if r.check_out is None),
        total_guests=len(guest_crud.find(db)),
        recent_activity=recent_activity,
    )
