from sqlalchemy import Column, DateTime, Index, Integer, String

from app.core.database import Base
from app.core.utils import current_time


class Attendance(Base):
    __tablename__ = 'attendance'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    # Member USN or guest id; members may be deleted while their history stays
    user_id = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)
    check_in = Column(DateTime, nullable=False, default=current_time, index=True)
    check_out = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)

    @property
    def is_open(self) -> bool:
        return self.check_out is None

    __table_args__ = (Index('ix_attendance_user_id_type', user_id, type),)
