"""
Attendance aggregation.

Pure functions over already-fetched members and attendance rows. The data
access (club lookup, id batching) lives in the CRUD layer; everything here is
deterministic given its inputs so it can be tested without a database.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel

from app.api.attendance.models import Attendance
from app.api.members.models import Member
from app.core.utils import duration_hours, round_hours

from . import schemas

TOP_MEMBERS_LIMIT = 5
UNKNOWN_NAME = 'Unknown'


class UserTally(BaseModel):
    """Running totals for one user across their attendance records."""

    count: int = 0
    hours: float = 0.0
    last_check_in: Optional[datetime] = None
    is_active: bool = False

    def add(self, record: Attendance) -> None:
        self.count += 1
        if record.check_in and record.check_out:
            self.hours += duration_hours(record.check_in, record.check_out)
        if record.check_out is None:
            self.is_active = True
        if record.check_in and (
            self.last_check_in is None or record.check_in > self.last_check_in
        ):
            self.last_check_in = record.check_in


def tally_by_user(records: Iterable[Attendance]) -> Dict[str, UserTally]:
    """Group records per user id, keeping first-seen order."""
    tallies: Dict[str, UserTally] = {}
    for record in records:
        tallies.setdefault(record.user_id, UserTally()).add(record)
    return tallies


def rank_top_members(
    tallies: Dict[str, UserTally],
    members: Sequence[Member],
    limit: int = TOP_MEMBERS_LIMIT,
) -> List[schemas.TopMember]:
    # sorted() is stable: equal counts keep first-seen order
    ranked = sorted(tallies.items(), key=lambda item: item[1].count, reverse=True)
    by_id = {m.id: m for m in members}
    top = []
    for user_id, tally in ranked[:limit]:
        member = by_id.get(user_id)
        top.append(
            schemas.TopMember(
                name=(member.name if member else None) or UNKNOWN_NAME,
                usn=(member.usn if member else None) or user_id,
                check_ins=tally.count,
                hours=round_hours(tally.hours),
            )
        )
    return top


def compute_club_stats(
    club: str,
    members: Sequence[Member],
    records: Sequence[Attendance],
    today_start: datetime,
) -> schemas.ClubStats:
    total_hours = 0.0
    active_now = 0
    active_today = 0
    for record in records:
        if record.check_in and record.check_out:
            total_hours += duration_hours(record.check_in, record.check_out)
        if record.check_out is None:
            active_now += 1
        if record.check_in and record.check_in >= today_start:
            active_today += 1

    total_members = len(members)
    return schemas.ClubStats(
        club=club,
        total_members=total_members,
        total_check_ins=len(records),
        active_today=active_today,
        active_now=active_now,
        total_hours=round_hours(total_hours),
        avg_hours_per_member=round_hours(total_hours / total_members)
        if total_members > 0
        else 0,
        top_members=rank_top_members(tally_by_user(records), members),
    )
