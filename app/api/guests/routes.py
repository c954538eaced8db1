from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.guests import schemas
from app.api.guests.crud import guest as guest_crud
from app.core.database import get_db
from app.core.security import TokenData, get_current_admin

router = APIRouter()


@router.get('/', response_model=list[schemas.GuestRow])
def get_guests(
    search: Optional[str] = Query(default=None),
    current_admin: TokenData = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return guest_crud.get_rows(db=db, search=search)


@router.get('/{guest_id}', response_model=schemas.Guest)
def get_guest(
    guest_id: int,
    current_admin: TokenData = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return guest_crud.get(db=db, id=guest_id, user=current_admin)
