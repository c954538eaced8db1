from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.attendance.crud import attendance as attendance_crud
from app.api.attendance.models import Attendance
from app.api.attendance.schemas import AttendanceType
from app.api.guests.crud import guest as guest_crud
from app.api.guests.schemas import GuestCreate
from app.api.members.crud import member as member_crud
from app.core.logger import log_error, log_event, logger
from app.core.security import SYSTEM_TOKEN, create_session_token

from . import schemas

CHECK_IN_ERROR = 'An error occurred. Please try again.'
CHECK_OUT_ERROR = 'An error occurred during check-out. Please try again.'


def _session_response(record: Attendance, user_name: str) -> schemas.CheckInResponse:
    session = schemas.SessionData(
        attendance_id=record.id,
        user_id=record.user_id,
        type=record.type,
        check_in_time=record.check_in,
        user_name=user_name,
    )
    return schemas.CheckInResponse(
        success=True,
        session=session,
        token=create_session_token(session),
    )


def _backend_error(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class CRUDCheckIn:
    def new_member_check_in(self, db: Session, usn: str) -> schemas.CheckInResponse:
        member = member_crud.get_by_usn(db, usn)
        logger.info('Member with USN %s found: %s', usn, member is not None)
        if not member:
            return schemas.CheckInResponse(
                success=False, guest_registration_required=True
            )

        open_record = attendance_crud.get_open_record(db, usn, AttendanceType.MEMBER)
        if open_record:
            logger.error(
                'Member %s already has open attendance %s', usn, open_record.id
            )
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail='Already checked in',
            )

        try:
            record = attendance_crud.open(db, usn, AttendanceType.MEMBER)
        except SQLAlchemyError as e:
            log_error(f'Error checking in member {usn}: {e}')
            raise _backend_error(CHECK_IN_ERROR)

        log_event('check_in', type=AttendanceType.MEMBER.value, method='manual_entry')
        return _session_response(record, member.name)

    def new_guest_check_in(
        self, db: Session, obj: GuestCreate
    ) -> schemas.CheckInResponse:
        try:
            guest, record = guest_crud.register(db, obj)
        except SQLAlchemyError as e:
            log_error(f'Error registering guest {obj.usn}: {e}')
            raise _backend_error(CHECK_IN_ERROR)

        log_event('check_in', type=AttendanceType.GUEST.value, method='registration')
        return _session_response(record, guest.full_name)

    def get_status(
        self, db: Session, session: schemas.SessionData
    ) -> schemas.SessionStatusResponse:
        record = attendance_crud.get(db, session.attendance_id, SYSTEM_TOKEN)
        session_status = (
            schemas.SessionStatus.ACTIVE
            if record.is_open
            else schemas.SessionStatus.CLOSED
        )
        return schemas.SessionStatusResponse(status=session_status, session=session)

    def check_out(
        self, db: Session, session: schemas.SessionData
    ) -> schemas.CheckOutResponse:
        try:
            record = attendance_crud.close(db, session.attendance_id)
        except SQLAlchemyError as e:
            db.rollback()
            log_error(f'Error checking out attendance {session.attendance_id}: {e}')
            raise _backend_error(CHECK_OUT_ERROR)

        duration_minutes = round(
            (record.check_out - session.check_in_time).total_seconds() / 60
        )
        log_event(
            'check_out', type=session.type.value, duration_minutes=duration_minutes
        )
        return schemas.CheckOutResponse(
            status=schemas.SessionStatus.CLOSED,
            session=session,
            check_out_time=record.check_out,
            duration_minutes=duration_minutes,
        )


check_in = CRUDCheckIn()
