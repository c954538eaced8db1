from datetime import timedelta
from unittest.mock import patch

from fastapi import status

from app.api.attendance.crud import attendance as attendance_crud
from app.api.attendance.schemas import AttendanceType
from app.core.utils import current_time


def test_club_stats_top_members(
    client, auth_headers, create_test_member, create_test_attendance
):
    create_test_member('S1', name='Light User')
    create_test_member('S2', name='Regular')
    now = current_time()
    for days_ago in (3, 2, 1):
        start = now - timedelta(days=days_ago)
        create_test_attendance('S2', start, start + timedelta(hours=1))
    create_test_attendance('S1', now - timedelta(days=5), now - timedelta(days=5, hours=-2))

    response = client.get('/stats/', headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    stats = response.json()
    assert stats['club'] == 'SOSC'
    assert stats['total_members'] == 2
    assert stats['total_check_ins'] == 4
    assert stats['total_hours'] == 5.0
    assert stats['avg_hours_per_member'] == 2.5
    assert stats['active_now'] == 0
    assert [m['usn'] for m in stats['top_members']] == ['S2', 'S1']
    assert stats['top_members'][0] == {
        'name': 'Regular',
        'usn': 'S2',
        'check_ins': 3,
        'hours': 3.0,
    }


def test_club_stats_only_count_own_club(
    client, challengers_headers, create_test_member, create_test_attendance
):
    create_test_member('S1', club='SOSC')
    create_test_member('C1', club='Challengers')
    create_test_attendance('S1', current_time())
    create_test_attendance('C1', current_time())

    stats = client.get('/stats/', headers=challengers_headers).json()

    assert stats['club'] == 'Challengers'
    assert stats['total_members'] == 1
    assert stats['total_check_ins'] == 1
    assert stats['active_now'] == 1
    assert stats['active_today'] == 1


def test_club_stats_empty_club(client, challengers_headers):
    stats = client.get('/stats/', headers=challengers_headers).json()

    assert stats['total_members'] == 0
    assert stats['avg_hours_per_member'] == 0
    assert stats['top_members'] == []


def test_all_club_stats(client, auth_headers, create_test_member):
    create_test_member('S1', club='SOSC')
    create_test_member('R1', club='SRC')

    response = client.get('/stats/all', headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    stats = response.json()
    assert [s['club'] for s in stats] == ['SOSC', 'Challengers', 'SRC']
    assert [s['total_members'] for s in stats] == [1, 0, 1]


def test_all_club_stats_denied_for_other_clubs(client, challengers_headers):
    response = client.get('/stats/all', headers=challengers_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert (
        response.json()['detail']
        == 'Admins of Challengers are not allowed to access this resource'
    )


def test_dashboard(
    client, auth_headers, create_test_member, create_test_attendance, test_guest
):
    create_test_member('S1')
    create_test_member('S2')
    now = current_time()
    create_test_attendance('S1', now - timedelta(days=3), now - timedelta(days=3, hours=-1))
    create_test_attendance('S1', now - timedelta(minutes=20), now - timedelta(minutes=5))
    create_test_attendance('S2', now - timedelta(minutes=10))
    create_test_attendance(str(test_guest.id), now - timedelta(minutes=1), type='guest')

    with patch('app.api.stats.crud.start_of_today', return_value=now - timedelta(hours=1)):
        response = client.get('/stats/dashboard', headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['total_members'] == 2
    assert data['today_check_ins'] == 2
    assert data['active_now'] == 1
    assert data['total_guests'] == 1
    activity = data['recent_activity']
    assert len(activity) == 4
    assert activity[0]['type'] == 'guest'
    assert activity[0]['action'] == 'Checked In'
    assert activity[1]['name'] == 'S2'
    assert activity[2]['action'] == 'Checked Out'


def test_dashboard_recent_activity_limit(
    client, auth_headers, test_member, create_test_attendance
):
    now = current_time()
    for i in range(12):
        start = now - timedelta(days=i + 1)
        create_test_attendance(test_member.id, start, start + timedelta(hours=1))

    data = client.get('/stats/dashboard', headers=auth_headers).json()

    assert len(data['recent_activity']) == 10


def test_find_for_users_batches_queries(db_session, create_test_member, create_test_attendance):
    usns = [f'S{i}' for i in range(7)]
    now = current_time()
    for i, usn in enumerate(usns):
        create_test_member(usn)
        create_test_attendance(usn, now - timedelta(minutes=i))

    with patch.object(
        attendance_crud, '_apply_filters', wraps=attendance_crud._apply_filters
    ) as apply_filters:
        records = attendance_crud.find_for_users(
            db_session, usns, AttendanceType.MEMBER, batch_size=3
        )

    assert apply_filters.call_count == 3
    assert sorted(r.user_id for r in records) == sorted(usns)


def test_find_for_users_filters_type(db_session, create_test_attendance):
    create_test_attendance('X', current_time())
    create_test_attendance('X', current_time(), type='guest')

    records = attendance_crud.find_for_users(db_session, ['X'], AttendanceType.MEMBER)

    assert len(records) == 1
    assert records[0].type == 'member'
