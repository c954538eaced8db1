from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.admins import schemas
from app.api.admins.crud import admin as admin_crud
from app.core.database import get_db
from app.core.security import TokenData, get_current_admin

router = APIRouter()


@router.post('/login', response_model=schemas.AdminAuthorization)
def login(
    credentials: schemas.AdminLogin,
    db: Session = Depends(get_db),
):
    return admin_crud.login(db=db, obj=credentials)


@router.get('/me', response_model=schemas.AdminSession)
def get_me(
    current_admin: TokenData = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return admin_crud.get_session(db=db, user=current_admin)


@router.patch('/me/name', response_model=schemas.AdminSession)
def update_name(
    data: schemas.NameUpdate,
    current_admin: TokenData = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return admin_crud.update_name(db=db, obj=data, user=current_admin)


@router.post('/me/password', response_model=schemas.Message)
def change_password(
    data: schemas.PasswordChange,
    current_admin: TokenData = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return admin_crud.change_password(db=db, obj=data, user=current_admin)
