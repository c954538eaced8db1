from datetime import timedelta

from fastapi import status

from app.api.attendance.models import Attendance
from app.api.members.models import Member
from app.core.utils import current_time


def test_add_member(client, auth_headers, db_session):
    response = client.post(
        '/members/',
        json={'usn': ' 1RV22CS001 ', 'name': 'Ananya Rao', 'email': None},
        headers=auth_headers,
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data['id'] == '1RV22CS001'
    assert data['usn'] == '1RV22CS001'
    assert data['club'] == 'SOSC'
    assert data['email'] == ''
    assert data['joined_at'] is not None

    member = db_session.query(Member).one()
    assert member.club == 'SOSC'


def test_member_is_added_to_the_admins_club(client, challengers_headers):
    response = client.post(
        '/members/', json={'usn': 'C1', 'name': 'Rahul'}, headers=challengers_headers
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()['club'] == 'Challengers'


def test_add_member_requires_usn_and_name(client, auth_headers):
    response = client.post('/members/', json={'usn': 'X1'}, headers=auth_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()['detail'] == 'USN and Name are required.'


def test_add_duplicate_member(client, auth_headers, test_member):
    response = client.post(
        '/members/', json={'usn': test_member.usn, 'name': 'Other'}, headers=auth_headers
    )

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()['detail'] == 'A member with USN 123 already exists'


def test_members_require_auth(client):
    response = client.get('/members/')

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_invalid_token(client):
    response = client.get(
        '/members/', headers={'Authorization': 'Bearer invalid_token'}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_list_members_only_own_club(
    client, auth_headers, create_test_member, create_test_attendance
):
    create_test_member('S1', club='SOSC', name='beta')
    create_test_member('S2', club='SOSC', name='Alpha')
    create_test_member('C1', club='Challengers', name='Aaron')
    now = current_time()
    create_test_attendance('S1', now - timedelta(hours=3), now - timedelta(hours=1))
    create_test_attendance('S1', now - timedelta(minutes=30))

    response = client.get('/members/', headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    rows = response.json()
    assert [r['usn'] for r in rows] == ['S2', 'S1']
    s1 = rows[1]
    assert s1['total_check_ins'] == 2
    assert s1['total_hours'] == 2.0
    assert s1['is_active'] is True
    assert s1['last_check_in'] is not None
    assert rows[0]['total_check_ins'] == 0
    assert rows[0]['last_check_in'] is None


def test_list_members_search_and_status(
    client, auth_headers, create_test_member, create_test_attendance
):
    create_test_member('S1', name='Karthik Menon')
    create_test_member('S2', name='Divya Shetty')
    create_test_attendance('S2', current_time())

    by_name = client.get('/members/', params={'search': 'karth'}, headers=auth_headers)
    assert [r['usn'] for r in by_name.json()] == ['S1']

    by_usn = client.get('/members/', params={'search': 's2'}, headers=auth_headers)
    assert [r['usn'] for r in by_usn.json()] == ['S2']

    active = client.get('/members/', params={'status': 'active'}, headers=auth_headers)
    assert [r['usn'] for r in active.json()] == ['S2']

    inactive = client.get(
        '/members/', params={'status': 'inactive'}, headers=auth_headers
    )
    assert [r['usn'] for r in inactive.json()] == ['S1']


def test_get_member_of_other_club(client, challengers_headers, test_member):
    response = client.get(f'/members/{test_member.usn}', headers=challengers_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_get_missing_member(client, auth_headers):
    response = client.get('/members/nope', headers=auth_headers)

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_member_attendance_details(
    client, auth_headers, test_member, create_test_attendance
):
    now = current_time()
    create_test_attendance(
        test_member.id, now - timedelta(days=1), now - timedelta(days=1, minutes=-45)
    )
    create_test_attendance(test_member.id, now - timedelta(minutes=10))

    response = client.get(f'/members/{test_member.usn}/attendance', headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    details = response.json()
    assert [d['duration'] for d in details] == ['Active', '0h 45m']


def test_delete_member_keeps_history(
    client, auth_headers, test_member, create_test_attendance, db_session
):
    create_test_attendance(test_member.id, current_time())

    response = client.delete(f'/members/{test_member.usn}', headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()['id'] == test_member.usn
    assert db_session.query(Member).count() == 0
    assert db_session.query(Attendance).filter_by(user_id='123').count() == 1


def test_delete_member_of_other_club(
    client, challengers_headers, test_member, db_session
):
    response = client.delete(f'/members/{test_member.usn}', headers=challengers_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert db_session.query(Member).count() == 1
