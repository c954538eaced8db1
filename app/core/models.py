# Import all models here so every table is registered on Base.metadata
from app.api.admins.models import Admin
from app.api.attendance.models import Attendance
from app.api.guests.models import Guest
from app.api.members.models import Member

# Re-export all models
__all__ = [
    'Admin',
    'Attendance',
    'Guest',
    'Member',
]
