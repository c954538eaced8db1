from sqlalchemy import Column, DateTime, String

from app.core.database import Base
from app.core.utils import current_time


class Member(Base):
    __tablename__ = 'members'

    # The USN doubles as the primary key and the check-in input
    id = Column(String, primary_key=True, index=True)
    usn = Column(String, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String)
    phone = Column(String)
    club = Column(String, index=True, nullable=False)
    joined_at = Column(DateTime, default=current_time)

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)
