from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.core.config import settings
from app.core.logger import logger
from app.core.security import SYSTEM_TOKEN
from app.core.utils import chunked, current_time

from . import models, schemas


class CRUDAttendance(
    CRUDBase[
        models.Attendance,
        schemas.InternalAttendanceCreate,
        schemas.AttendanceFilter,
    ]
):
    def open(
        self,
        db: Session,
        user_id: str,
        type: schemas.AttendanceType,
        commit: bool = True,
    ) -> models.Attendance:
        logger.info('Opening %s attendance for %s', type.value, user_id)
        new_record = schemas.InternalAttendanceCreate(
            user_id=user_id,
            type=type,
            check_in=current_time(),
        )
        return self.create(db, new_record, SYSTEM_TOKEN, commit=commit)

    def close(self, db: Session, attendance_id: int) -> models.Attendance:
        """Stamp the check-out time. A record that is already closed is overwritten."""
        record = self.get(db, attendance_id, SYSTEM_TOKEN)
        if record.check_out is not None:
            logger.warning(
                'Attendance %s already closed at %s, overwriting',
                attendance_id,
                record.check_out,
            )
        record.check_out = current_time()
        db.commit()
        db.refresh(record)
        return record

    def get_open_record(
        self,
        db: Session,
        user_id: str,
        type: schemas.AttendanceType,
    ) -> Optional[models.Attendance]:
        return (
            db.query(self.model)
            .filter(
                self.model.user_id == user_id,
                self.model.type == type.value,
                self.model.check_out.is_(None),
            )
            .first()
        )

    def find_for_user(
        self,
        db: Session,
        user_id: str,
        type: schemas.AttendanceType,
    ) -> List[models.Attendance]:
        filters = schemas.AttendanceFilter(user_id=user_id, type=type)
        return self.find(db, filters=filters, sort_by='check_in', sort_order='desc')

    def find_for_users(
        self,
        db: Session,
        user_ids: Sequence[str],
        type: schemas.AttendanceType,
        since: Optional[datetime] = None,
        batch_size: Optional[int] = None,
    ) -> List[models.Attendance]:
        """Fetch records for many users, one membership query per batch of ids."""
        batch_size = batch_size or settings.STATS_BATCH_SIZE
        records = []
        for batch in chunked(list(user_ids), batch_size):
            query = self._apply_filters(
                db.query(self.model),
                schemas.AttendanceFilter(user_id_in=batch, type=type),
            )
            if since is not None:
                query = query.filter(self.model.check_in >= since)
            records.extend(query.order_by(self.model.check_in, self.model.id).all())
        logger.debug(
            'Fetched %s %s records for %s users', len(records), type.value, len(user_ids)
        )
        return records

    def find_by_type(
        self, db: Session, type: schemas.AttendanceType
    ) -> List[models.Attendance]:
        filters = schemas.AttendanceFilter(type=type)
        return self.find(db, filters=filters, sort_by='check_in', sort_order='desc')

    def find_recent(self, db: Session, limit: int = 10) -> List[models.Attendance]:
        return (
            db.query(self.model)
            .order_by(self.model.check_in.desc(), self.model.id.desc())
            .limit(limit)
            .all()
        )


attendance = CRUDAttendance(models.Attendance)
