from sqlalchemy import Column, DateTime, Integer, String

from app.core.database import Base
from app.core.utils import current_time


class Guest(Base):
    __tablename__ = 'guests'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    usn = Column(String, nullable=False)
    full_name = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    purpose = Column(String, nullable=False)

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)
