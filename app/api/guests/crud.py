from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.attendance.crud import attendance as attendance_crud
from app.api.attendance.models import Attendance
from app.api.attendance.schemas import AttendanceType
from app.api.base_crud import CRUDBase
from app.core.logger import logger
from app.core.security import TokenData
from app.core.utils import format_duration

from . import models, schemas

STILL_HERE = 'Still here'
NO_VISIT = '-'


def guest_duration(record: Optional[Attendance]) -> str:
    if record is None:
        return NO_VISIT
    if record.check_out is None:
        return STILL_HERE
    return format_duration(record.check_in, record.check_out)


def filter_guest_rows(
    rows: List[schemas.GuestRow], search: Optional[str] = None
) -> List[schemas.GuestRow]:
    if not search:
        return rows
    q = search.lower()
    return [
        g
        for g in rows
        if q in g.full_name.lower()
        or q in g.usn.lower()
        or q in g.purpose.lower()
        or q in g.phone_number
    ]


class CRUDGuest(CRUDBase[models.Guest, schemas.GuestCreate, BaseModel]):
    def _check_permission(self, db_obj: models.Guest, user: TokenData) -> bool:
        # Guests are shared by every club
        return user is not None

    def register(
        self, db: Session, obj: schemas.GuestCreate
    ) -> Tuple[models.Guest, Attendance]:
        """Create the guest and their open attendance record in one transaction."""
        try:
            guest = self.create(db, obj, commit=False)
            record = attendance_crud.open(
                db, str(guest.id), AttendanceType.GUEST, commit=False
            )
            db.commit()
        except SQLAlchemyError as e:
            logger.error('Error registering guest %s: %s', obj.usn, str(e))
            db.rollback()
            raise
        db.refresh(guest)
        db.refresh(record)
        logger.info('Guest %s registered with attendance %s', guest.id, record.id)
        return guest, record

    def get_rows(
        self, db: Session, search: Optional[str] = None
    ) -> List[schemas.GuestRow]:
        guests = self.find(db, sort_by='created_at', sort_order='desc')

        # Records come newest first, so the first one seen per guest is the latest
        latest: Dict[str, Attendance] = {}
        for record in attendance_crud.find_by_type(db, AttendanceType.GUEST):
            latest.setdefault(record.user_id, record)

        rows = []
        for guest in guests:
            record = latest.get(str(guest.id))
            rows.append(
                schemas.GuestRow(
                    id=guest.id,
                    usn=guest.usn or NO_VISIT,
                    full_name=guest.full_name,
                    phone_number=guest.phone_number,
                    purpose=guest.purpose,
                    created_at=guest.created_at,
                    check_in=record.check_in if record else None,
                    check_out=record.check_out if record else None,
                    duration=guest_duration(record),
                )
            )
        return filter_guest_rows(rows, search)


guest = CRUDGuest(models.Guest)
