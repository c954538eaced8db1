from datetime import datetime
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.admins.models import Admin
from app.api.attendance.models import Attendance
from app.api.guests.models import Guest
from app.api.members.models import Member
from app.core.config import Environment, settings
from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.core.utils import current_time
from main import app

TEST_PASSWORD = 'secret123'


@pytest.fixture(scope='session', autouse=True)
def check_test_environment():
    if settings.ENVIRONMENT != Environment.TEST:
        raise RuntimeError(
            f'Tests can only be executed in test environment. Current environment: {settings.ENVIRONMENT}'
        )


@pytest.fixture(scope='session')
def test_db_engine():
    engine = create_engine(
        settings.SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope='function')
def db_session(test_db_engine):
    """Create a fresh database session for each test"""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_db_engine
    )

    # Drop and recreate all tables before each test
    Base.metadata.drop_all(bind=test_db_engine)
    Base.metadata.create_all(bind=test_db_engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope='function')
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def get_auth_headers_for_admin(admin: Admin) -> dict:
    """Generate auth headers for a specific admin"""
    admin_data = {'admin_id': admin.id, 'email': admin.email, 'club': admin.club}
    access_token = create_access_token(data=admin_data)
    return {'Authorization': f'Bearer {access_token}'}


@pytest.fixture(scope='function')
def create_test_admin(db_session):
    """Factory fixture to create test admins"""

    def _create_admin(club: str, email: Optional[str] = None, name: str = 'Test Admin'):
        admin = Admin(
            email=email or f'admin@{club.lower()}.example.com',
            name=name,
            club=club,
        )
        admin.set_password(TEST_PASSWORD)
        db_session.add(admin)
        db_session.commit()
        return admin

    yield _create_admin


@pytest.fixture(scope='function')
def sosc_admin(create_test_admin):
    return create_test_admin('SOSC')


@pytest.fixture(scope='function')
def challengers_admin(create_test_admin):
    return create_test_admin('Challengers')


@pytest.fixture(scope='function')
def auth_headers(sosc_admin):
    """Auth headers for an admin of the privileged club"""
    return get_auth_headers_for_admin(sosc_admin)


@pytest.fixture(scope='function')
def challengers_headers(challengers_admin):
    return get_auth_headers_for_admin(challengers_admin)


@pytest.fixture(scope='function')
def create_test_member(db_session):
    """Factory fixture to create test members"""

    def _create_member(usn: str, club: str = 'SOSC', name: Optional[str] = None):
        member = Member(
            id=usn,
            usn=usn,
            name=name or f'Member {usn}',
            email=f'{usn.lower()}@example.com',
            phone='9800000000',
            club=club,
            joined_at=current_time(),
        )
        db_session.add(member)
        db_session.commit()
        return member

    yield _create_member


@pytest.fixture(scope='function')
def test_member(create_test_member):
    return create_test_member('123', name='Ananya Rao')


@pytest.fixture(scope='function')
def create_test_attendance(db_session):
    """Factory fixture to create attendance records with explicit times"""

    def _create_attendance(
        user_id: str,
        check_in: datetime,
        check_out: Optional[datetime] = None,
        type: str = 'member',
    ):
        record = Attendance(
            user_id=user_id, type=type, check_in=check_in, check_out=check_out
        )
        db_session.add(record)
        db_session.commit()
        return record

    yield _create_attendance


@pytest.fixture(scope='function')
def test_guest(db_session):
    guest = Guest(
        usn='999',
        full_name='Walk In',
        phone_number='9811111111',
        purpose='Workshop',
    )
    db_session.add(guest)
    db_session.commit()
    return guest
