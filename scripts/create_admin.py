import argparse
from getpass import getpass

from fastapi import HTTPException

from app.api.admins import crud as admin_crud
from app.api.admins import schemas as admin_schemas
from app.api.members.schemas import Club
from app.core import models  # noqa: F401
from app.core.database import SessionLocal, create_db


def parse_args():
    parser = argparse.ArgumentParser(description='Create an admin account for a club')
    parser.add_argument('--email', required=True)
    parser.add_argument('--name', required=True)
    parser.add_argument('--club', required=True, choices=[c.value for c in Club])
    parser.add_argument(
        '--password',
        help='Password for the new admin. Prompted for when omitted.',
    )
    return parser.parse_args()


def main():
    args = parse_args()
    password = args.password or getpass('Password: ')
    if len(password) < admin_crud.MIN_PASSWORD_LENGTH:
        print(f'Password must be at least {admin_crud.MIN_PASSWORD_LENGTH} characters')
        return

    create_db()
    db = SessionLocal()
    try:
        obj = admin_schemas.AdminCreate(
            email=args.email, name=args.name, club=args.club, password=password
        )
        admin = admin_crud.admin.create(db, obj)
        print(f'Admin created: {admin.id} - {admin.email} ({admin.club})')
    except HTTPException as e:
        print(f'Could not create admin: {e.detail}')
    finally:
        db.close()


if __name__ == '__main__':
    main()
