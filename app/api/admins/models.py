from datetime import timedelta

from sqlalchemy import Column, DateTime, Integer, String, event
from werkzeug.security import check_password_hash, generate_password_hash

from app.core.config import settings
from app.core.database import Base
from app.core.security import Token, create_access_token
from app.core.utils import current_time


class Admin(Base):
    __tablename__ = 'admins'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    club = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def get_authorization(self) -> Token:
        data = {'admin_id': self.id, 'email': self.email, 'club': self.club}
        expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        return Token(
            access_token=create_access_token(data=data, expires_delta=expires),
            token_type='Bearer',
        )


@event.listens_for(Admin, 'before_insert')
def clean_email(mapper, connection, target):
    if target.email:
        target.email = target.email.lower().strip()
