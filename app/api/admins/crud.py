from typing import Optional

from fastapi import HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.core.exceptions.auth_exceptions import IncorrectPassword, WrongCredentials
from app.core.logger import logger
from app.core.security import SYSTEM_TOKEN, TokenData

from . import models, schemas

MIN_PASSWORD_LENGTH = 6


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def to_session(admin: models.Admin) -> schemas.AdminSession:
    return schemas.AdminSession(
        uid=admin.id, email=admin.email, name=admin.name, club=admin.club
    )


class CRUDAdmin(CRUDBase[models.Admin, schemas.AdminCreate, BaseModel]):
    def _check_permission(self, db_obj: models.Admin, user: TokenData) -> bool:
        return user == SYSTEM_TOKEN or db_obj.id == user.admin_id

    def get_by_email(self, db: Session, email: str) -> Optional[models.Admin]:
        return (
            db.query(self.model).filter(self.model.email == email.lower().strip()).first()
        )

    def create(
        self,
        db: Session,
        obj: schemas.AdminCreate,
        user: Optional[TokenData] = None,
    ) -> models.Admin:
        if self.get_by_email(db, obj.email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f'An admin with email {obj.email} already exists',
            )
        admin = self.model(email=obj.email, name=obj.name, club=obj.club)
        admin.set_password(obj.password)
        db.add(admin)
        db.commit()
        db.refresh(admin)
        logger.info('Admin %s created for %s', admin.email, admin.club)
        return admin

    def login(self, db: Session, obj: schemas.AdminLogin) -> schemas.AdminAuthorization:
        if not obj.email or not obj.password:
            raise _bad_request('Please fill in all fields')

        admin = self.get_by_email(db, obj.email)
        if not admin or not admin.check_password(obj.password):
            logger.error('Failed login for %s', obj.email)
            raise WrongCredentials()

        token = admin.get_authorization()
        logger.info('Admin %s logged in (%s)', admin.id, admin.club)
        return schemas.AdminAuthorization(
            access_token=token.access_token,
            token_type=token.token_type,
            admin=to_session(admin),
        )

    def get_session(self, db: Session, user: TokenData) -> schemas.AdminSession:
        return to_session(self.get(db, user.admin_id, user))

    def update_name(
        self, db: Session, obj: schemas.NameUpdate, user: TokenData
    ) -> schemas.AdminSession:
        admin = self.get(db, user.admin_id, user)
        if not obj.name:
            raise _bad_request('Name cannot be empty.')
        if obj.name == admin.name:
            raise _bad_request('Name is the same as before.')

        admin.name = obj.name
        db.commit()
        db.refresh(admin)
        logger.info('Admin %s renamed', admin.id)
        return to_session(admin)

    def change_password(
        self, db: Session, obj: schemas.PasswordChange, user: TokenData
    ) -> schemas.Message:
        if not obj.current_password or not obj.new_password or not obj.confirm_password:
            raise _bad_request('All fields are required.')
        if len(obj.new_password) < MIN_PASSWORD_LENGTH:
            raise _bad_request(
                f'New password must be at least {MIN_PASSWORD_LENGTH} characters.'
            )
        if obj.new_password != obj.confirm_password:
            raise _bad_request('New passwords do not match.')

        # The current password is the re-authentication, whatever the token age
        admin = self.get(db, user.admin_id, user)
        if not admin.check_password(obj.current_password):
            logger.error('Incorrect current password for admin %s', admin.id)
            raise IncorrectPassword()

        admin.set_password(obj.new_password)
        db.commit()
        logger.info('Admin %s changed their password', admin.id)
        return schemas.Message(message='Password updated successfully.')


admin = CRUDAdmin(models.Admin)
