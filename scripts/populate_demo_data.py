import csv
import os
from datetime import timedelta

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.api.admins import crud as admin_crud
from app.api.admins import schemas as admin_schemas
from app.api.attendance import crud as attendance_crud
from app.api.attendance import schemas as attendance_schemas
from app.api.members import crud as member_crud
from app.api.members import schemas as member_schemas
from app.core import models  # noqa: F401
from app.core.config import settings
from app.core.database import SessionLocal, create_db
from app.core.security import SYSTEM_TOKEN, TokenData
from app.core.utils import current_time

DEMO_PASSWORD = 'launchpad'


def get_or_create_admin(db: Session, club: member_schemas.Club) -> TokenData:
    email = f'admin@{club.value.lower()}.example.com'
    admin = admin_crud.admin.get_by_email(db, email)
    if not admin:
        admin = admin_crud.admin.create(
            db,
            admin_schemas.AdminCreate(
                email=email,
                name=f'{club.value} Admin',
                club=club,
                password=DEMO_PASSWORD,
            ),
        )
        print(f'Admin created: {admin.id} - {admin.email}')
    return TokenData(admin_id=admin.id, email=admin.email, club=admin.club)


def read_members_csv(csv_path: str):
    with open(csv_path, newline='') as csvfile:
        return list(csv.DictReader(csvfile))


def create_member(db: Session, row: dict, admin: TokenData):
    if member_crud.member.get_by_usn(db, row['usn']):
        print(f'Member already exists: {row["usn"]}')
        return None
    try:
        member = member_crud.member.create(
            db,
            member_schemas.MemberCreate(
                usn=row['usn'], name=row['name'], email=row['email'], phone=row['phone']
            ),
            admin,
        )
    except HTTPException as e:
        print(f'Could not create member {row["usn"]}: {e.detail}')
        return None
    print(f'Member created: {member.id} - {member.name} ({member.club})')
    return member


def create_past_attendance(db: Session, usn: str, visits: int):
    """Closed visits on previous days, each a couple of hours long."""
    now = current_time()
    for day in range(1, visits + 1):
        check_in = now - timedelta(days=day, hours=3)
        record = attendance_schemas.InternalAttendanceCreate(
            user_id=usn,
            type=attendance_schemas.AttendanceType.MEMBER,
            check_in=check_in,
            check_out=check_in + timedelta(hours=2, minutes=15 * day),
        )
        attendance_crud.attendance.create(db, record, SYSTEM_TOKEN)
    print(f'{visits} past visits created for {usn}')


def main():
    create_db()
    db = SessionLocal()
    try:
        print('\nDatabase Connection Information:')
        print(f'Host: {settings.DB_HOST}')
        print(f'Port: {settings.DB_PORT}')
        print(f'Database Name: {settings.DB_NAME}')
        print(f'Username: {settings.DB_USERNAME}')

        print('\nThis script will create demo data in the database:')
        print(f'1. One admin per club (password: {DEMO_PASSWORD})')
        print('2. Members from demo_members.csv, with past attendance')

        confirm = input('Do you want to proceed? (y/N): ')
        if confirm.lower() != 'y':
            print('Operation cancelled')
            return

        admins = {club.value: get_or_create_admin(db, club) for club in member_schemas.Club}
        csv_path = os.path.join(os.path.dirname(__file__), 'demo_members.csv')
        for i, row in enumerate(read_members_csv(csv_path)):
            member = create_member(db, row, admins[row['club']])
            if member:
                create_past_attendance(db, member.id, visits=i % 4 + 1)
    finally:
        db.close()


if __name__ == '__main__':
    main()
