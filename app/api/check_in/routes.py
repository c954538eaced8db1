from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.check_in import schemas
from app.api.check_in.crud import check_in as check_in_crud
from app.api.guests.schemas import GuestCreate
from app.core.database import get_db
from app.core.security import get_check_in_session

router = APIRouter()


@router.post('/', response_model=schemas.CheckInResponse)
def new_check_in(
    check_in: schemas.NewCheckIn,
    db: Session = Depends(get_db),
):
    return check_in_crud.new_member_check_in(db=db, usn=check_in.usn)


@router.post('/guest', response_model=schemas.CheckInResponse)
def new_guest_check_in(
    guest: GuestCreate,
    db: Session = Depends(get_db),
):
    return check_in_crud.new_guest_check_in(db=db, obj=guest)


@router.get('/status', response_model=schemas.SessionStatusResponse)
def get_status(
    session: schemas.SessionData = Depends(get_check_in_session),
    db: Session = Depends(get_db),
):
    return check_in_crud.get_status(db=db, session=session)


@router.post('/check-out', response_model=schemas.CheckOutResponse)
def check_out(
    session: schemas.SessionData = Depends(get_check_in_session),
    db: Session = Depends(get_db),
):
    return check_in_crud.check_out(db=db, session=session)
