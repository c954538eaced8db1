from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.attendance.schemas import AttendanceDetail
from app.api.members import schemas
from app.api.members.crud import member as member_crud
from app.core.database import get_db
from app.core.security import TokenData, get_current_admin

router = APIRouter()


@router.get('/', response_model=list[schemas.MemberRow])
def get_members(
    search: Optional[str] = Query(default=None),
    status_filter: schemas.MemberStatusFilter = Query(
        default=schemas.MemberStatusFilter.ALL, alias='status'
    ),
    current_admin: TokenData = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return member_crud.get_rows(
        db=db,
        user=current_admin,
        search=search,
        status_filter=status_filter,
    )


@router.post('/', response_model=schemas.Member, status_code=status.HTTP_201_CREATED)
def add_member(
    member: schemas.MemberCreate,
    current_admin: TokenData = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return member_crud.create(db=db, obj=member, user=current_admin)


@router.get('/{usn}', response_model=schemas.Member)
def get_member(
    usn: str,
    current_admin: TokenData = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return member_crud.get(db=db, id=usn, user=current_admin)


@router.get('/{usn}/attendance', response_model=list[AttendanceDetail])
def get_member_attendance(
    usn: str,
    current_admin: TokenData = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return member_crud.get_attendance_details(db=db, usn=usn, user=current_admin)


@router.delete('/{usn}', response_model=schemas.Member)
def delete_member(
    usn: str,
    current_admin: TokenData = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return member_crud.delete(db=db, id=usn, user=current_admin)
