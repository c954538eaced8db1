from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.api.attendance.crud import attendance as attendance_crud
from app.api.attendance.schemas import AttendanceDetail, AttendanceType
from app.api.base_crud import CRUDBase
from app.api.stats.aggregation import UserTally, tally_by_user
from app.core.logger import logger
from app.core.security import SYSTEM_TOKEN, TokenData
from app.core.utils import current_time, format_duration, round_hours

from . import models, schemas

ACTIVE_DURATION = 'Active'


def filter_member_rows(
    rows: List[schemas.MemberRow],
    search: Optional[str] = None,
    status_filter: schemas.MemberStatusFilter = schemas.MemberStatusFilter.ALL,
) -> List[schemas.MemberRow]:
    if search:
        q = search.lower()
        rows = [
            r
            for r in rows
            if q in r.name.lower() or q in r.usn.lower() or q in r.email.lower()
        ]
    if status_filter == schemas.MemberStatusFilter.ACTIVE:
        rows = [r for r in rows if r.is_active]
    elif status_filter == schemas.MemberStatusFilter.INACTIVE:
        rows = [r for r in rows if not r.is_active]
    return rows


class CRUDMember(
    CRUDBase[models.Member, schemas.InternalMemberCreate, schemas.MemberFilter]
):
    def _check_permission(self, db_obj: models.Member, user: TokenData) -> bool:
        return user == SYSTEM_TOKEN or db_obj.club == user.club

    def find(
        self,
        db: Session,
        filters: Optional[schemas.MemberFilter] = None,
        user: Optional[TokenData] = None,
        sort_by: str = 'name',
        sort_order: str = 'asc',
    ) -> List[models.Member]:
        if user and user != SYSTEM_TOKEN:
            filters = filters or schemas.MemberFilter()
            filters.club = user.club
        return super().find(db, filters=filters, sort_by=sort_by, sort_order=sort_order)

    def find_by_club(self, db: Session, club: str) -> List[models.Member]:
        return self.find(db, filters=schemas.MemberFilter(club=club))

    def get_by_usn(self, db: Session, usn: str) -> Optional[models.Member]:
        return db.query(self.model).filter(self.model.id == usn).first()

    def create(
        self,
        db: Session,
        obj: schemas.MemberCreate,
        user: TokenData,
    ) -> models.Member:
        if not obj.usn or not obj.name:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='USN and Name are required.',
            )
        if self.get_by_usn(db, obj.usn):
            logger.error('Member %s already exists', obj.usn)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f'A member with USN {obj.usn} already exists',
            )

        to_create = schemas.InternalMemberCreate(
            **obj.model_dump(),
            id=obj.usn,
            club=user.club,
            joined_at=current_time(),
        )
        member = super().create(db, to_create, user)
        logger.info('Member %s added to %s by admin %s', member.id, member.club, user.admin_id)
        return member

    def delete(self, db: Session, id: str, user: TokenData) -> schemas.Member:
        member = self.get(db, id, user)
        response = schemas.Member.model_validate(member)
        super().delete(db, id, user)
        logger.info(
            'Member %s removed from %s, attendance history kept', response.id, response.club
        )
        return response

    def get_rows(
        self,
        db: Session,
        user: TokenData,
        search: Optional[str] = None,
        status_filter: schemas.MemberStatusFilter = schemas.MemberStatusFilter.ALL,
    ) -> List[schemas.MemberRow]:
        members = self.find(db, user=user)
        records = attendance_crud.find_for_users(
            db, [m.id for m in members], AttendanceType.MEMBER
        )
        tallies = tally_by_user(records)

        rows = []
        for member in members:
            tally = tallies.get(member.id) or UserTally()
            rows.append(
                schemas.MemberRow(
                    id=member.id,
                    name=member.name or 'Unknown',
                    usn=member.usn or member.id,
                    email=member.email or '-',
                    phone=member.phone or '-',
                    club=member.club,
                    total_check_ins=tally.count,
                    total_hours=round_hours(tally.hours),
                    last_check_in=tally.last_check_in,
                    is_active=tally.is_active,
                )
            )
        rows.sort(key=lambda r: r.name.lower())
        return filter_member_rows(rows, search, status_filter)

    def get_attendance_details(
        self, db: Session, usn: str, user: TokenData
    ) -> List[AttendanceDetail]:
        member = self.get(db, usn, user)
        records = attendance_crud.find_for_user(db, member.id, AttendanceType.MEMBER)
        return [
            AttendanceDetail(
                id=r.id,
                check_in=r.check_in,
                check_out=r.check_out,
                duration=format_duration(r.check_in, r.check_out)
                if r.check_out
                else ACTIVE_DURATION,
            )
            for r in records
        ]


member = CRUDMember(models.Member)
