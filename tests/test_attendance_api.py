"""Attendance endpoints: status codes, error kinds and role checks."""
import json

from dojo_manager import db
from dojo_manager.models.attendance import AttendanceRecord
from dojo_manager.models.grade import Grade
from dojo_manager.models.member import Member

def post_attendance(client, headers, **payload):
    return client.post('/api/attendance/', json=payload, headers=headers)

def test_requires_token(client):
    response = client.get('/api/attendance/')
    assert response.status_code == 401
    data = json.loads(response.data)
    assert data['error'] is True
    assert data['kind'] == 'authorization_required'

def test_member_cannot_record_attendance(client, member_headers, dojo_class, members):
    response = post_attendance(client, member_headers, member_id=members[0], class_id=dojo_class, date='2024-01-10')
    assert response.status_code == 403
    assert json.loads(response.data)['kind'] == 'forbidden'

def test_create_regular_and_duplicate(client, instructor_headers, dojo_class, members):
    payload = dict(member_id=members[0], class_id=dojo_class, date='2024-02-01', status='present')

    response = post_attendance(client, instructor_headers, **payload)
    assert response.status_code == 201
    data = json.loads(response.data)['data']
    assert data['hours_attended'] == 1.5
    assert data['attendance_type'] == 'regular'
    assert data['first_name'] == 'Ana'

    response = post_attendance(client, instructor_headers, **payload)
    assert response.status_code == 400
    data = json.loads(response.data)
    assert data['kind'] == 'duplicate_record'
    assert data['status_code'] == 400

def test_create_with_unknown_class(client, instructor_headers, members):
    response = post_attendance(client, instructor_headers, member_id=members[0], class_id=999, date='2024-01-10')
    assert response.status_code == 400
    assert json.loads(response.data)['kind'] == 'invalid_class'

def test_create_missing_fields(client, instructor_headers):
    response = post_attendance(client, instructor_headers, date='2024-01-10')
    assert response.status_code == 400
    assert json.loads(response.data)['kind'] == 'validation_error'

def test_non_json_body(client, instructor_headers):
    response = client.post('/api/attendance/', data='member_id=1', headers=instructor_headers)
    assert response.status_code == 400
    assert json.loads(response.data)['kind'] == 'validation_error'

def test_backdate_requires_reason(client, instructor_headers, dojo_class, members):
    response = client.post('/api/attendance/backdate', headers=instructor_headers, json={
        'member_id': members[0], 'class_id': dojo_class, 'date': '2024-01-03',
        'status': 'present', 'adjustment_reason': '   '
    })
    assert response.status_code == 400
    assert json.loads(response.data)['kind'] == 'missing_reason'

def test_backdate_records_who_and_why(client, users, instructor_headers, dojo_class, members):
    response = client.post('/api/attendance/backdate', headers=instructor_headers, json={
        'member_id': members[0], 'class_id': dojo_class, 'date': '2024-01-03',
        'status': 'late', 'adjustment_reason': 'Paper sheet'
    })
    assert response.status_code == 201
    data = json.loads(response.data)['data']
    assert data['attendance_type'] == 'backdated'
    assert data['adjusted_by'] == users['instructor']
    assert data['adjusted_by_email'] == 'sensei@dojo.test'

def test_get_and_adjust_record(client, users, admin_headers, instructor_headers, dojo_class, members):
    created = json.loads(post_attendance(client, instructor_headers, member_id=members[0],
                                         class_id=dojo_class, date='2024-01-10').data)['data']

    response = client.put(f"/api/attendance/{created['id']}", headers=admin_headers, json={
        'status': 'excused', 'adjustment_reason': 'Injury'
    })
    assert response.status_code == 200
    data = json.loads(response.data)['data']
    assert data['attendance_type'] == 'manual_adjustment'
    assert data['status'] == 'excused'
    assert data['adjusted_by'] == users['admin']

    response = client.get(f"/api/attendance/{created['id']}", headers=admin_headers)
    assert json.loads(response.data)['data']['adjustment_reason'] == 'Injury'

def test_adjust_without_reason(client, instructor_headers, dojo_class, members):
    created = json.loads(post_attendance(client, instructor_headers, member_id=members[0],
                                         class_id=dojo_class, date='2024-01-10').data)['data']

    response = client.put(f"/api/attendance/{created['id']}", headers=instructor_headers, json={'status': 'absent'})
    assert response.status_code == 400
    assert json.loads(response.data)['kind'] == 'missing_reason'

def test_missing_record(client, instructor_headers):
    response = client.get('/api/attendance/999', headers=instructor_headers)
    assert response.status_code == 404
    assert json.loads(response.data)['kind'] == 'record_not_found'

    response = client.put('/api/attendance/999', headers=instructor_headers, json={'adjustment_reason': 'Typo'})
    assert response.status_code == 404

def test_query_history_with_pagination(client, member_headers, instructor_headers, dojo_class, members):
    for day in ('2024-01-08', '2024-01-15', '2024-01-22'):
        post_attendance(client, instructor_headers, member_id=members[0], class_id=dojo_class, date=day)

    response = client.get('/api/attendance/?date_from=2024-01-10&per_page=1', headers=member_headers)
    assert response.status_code == 200
    body = json.loads(response.data)
    assert body['meta']['total'] == 2
    assert body['meta']['pages'] == 2
    assert body['data'][0]['date'] == '2024-01-22'

def test_query_bad_filter(client, member_headers):
    response = client.get('/api/attendance/?date_from=not-a-date', headers=member_headers)
    assert response.status_code == 400
    assert json.loads(response.data)['kind'] == 'validation_error'

def test_class_roster(client, instructor_headers, dojo_class, members):
    grade = Grade(name='Yellow Belt', color='yellow', order_rank=2)
    grade.save()
    db.session.get(Member, members[0]).current_grade_id = grade.id
    db.session.commit()

    for member_id in members:
        post_attendance(client, instructor_headers, member_id=member_id, class_id=dojo_class, date='2024-01-10')

    response = client.get(f'/api/attendance/class/{dojo_class}/date/2024-01-10', headers=instructor_headers)
    assert response.status_code == 200
    roster = json.loads(response.data)['data']
    assert [row['last_name'] for row in roster] == ['Kato', 'Lopez', 'Ng']
    assert roster[1]['grade_name'] == 'Yellow Belt'
    assert roster[1]['grade_color'] == 'yellow'
    assert roster[0]['current_grade_id'] is None

    response = client.get(f'/api/attendance/class/{dojo_class}/date/tuesday', headers=instructor_headers)
    assert response.status_code == 400

def test_export_csv(client, instructor_headers, dojo_class, members):
    post_attendance(client, instructor_headers, member_id=members[0], class_id=dojo_class, date='2024-01-10')

    response = client.get(f'/api/attendance/export?class_id={dojo_class}', headers=instructor_headers)
    assert response.status_code == 200
    assert response.headers['Content-Type'].startswith('text/csv')
    assert 'attachment' in response.headers['Content-Disposition']
    assert 'Ana Lopez' in response.get_data(as_text=True)

def test_live_session_flow(client, instructor_headers, dojo_class, members):
    response = client.post('/api/attendance/sessions', headers=instructor_headers,
                           json={'class_id': dojo_class, 'date': '2024-03-01'})
    assert response.status_code == 201
    session_id = json.loads(response.data)['data']['id']

    response = client.post('/api/attendance/live', headers=instructor_headers,
                           json={'session_id': session_id, 'member_id': members[2], 'action': 'check_in'})
    assert response.status_code == 201

    response = client.post('/api/attendance/live', headers=instructor_headers,
                           json={'session_id': session_id, 'member_id': members[2], 'action': 'check_in'})
    assert response.status_code == 400
    assert json.loads(response.data)['kind'] == 'already_checked_in'

    response = client.get(f'/api/attendance/sessions/{session_id}/live', headers=instructor_headers)
    live = json.loads(response.data)['data']
    assert [entry['last_name'] for entry in live['checked_in']] == ['Ng']
    assert live['checked_out'] == []

    response = client.post('/api/attendance/live', headers=instructor_headers,
                           json={'session_id': session_id, 'member_id': members[2], 'action': 'check_out'})
    assert response.status_code == 200

    response = client.put(f'/api/attendance/sessions/{session_id}/end', headers=instructor_headers)
    assert response.status_code == 200
    assert json.loads(response.data)['data']['status'] == 'ended'

    response = client.put(f'/api/attendance/sessions/{session_id}/end', headers=instructor_headers)
    assert response.status_code == 400
    assert json.loads(response.data)['kind'] == 'session_not_active'

    response = client.post(f'/api/attendance/sessions/{session_id}/finalize', headers=instructor_headers)
    assert response.status_code == 200
    summary = json.loads(response.data)['data']
    assert summary['records_processed'] == 1
    assert summary['failed'] == 0

    response = client.get(
        f'/api/attendance/?class_id={dojo_class}&date_from=2024-03-01&date_to=2024-03-01',
        headers=instructor_headers
    )
    records = json.loads(response.data)['data']
    assert len(records) == 1
    assert records[0]['member_id'] == members[2]
    assert records[0]['attendance_type'] == 'live_update'
    assert records[0]['status'] == 'left_early'

def test_check_out_without_check_in(client, instructor_headers, dojo_class, members):
    session_id = json.loads(client.post('/api/attendance/sessions', headers=instructor_headers,
                                        json={'class_id': dojo_class}).data)['data']['id']

    response = client.post('/api/attendance/live', headers=instructor_headers,
                           json={'session_id': session_id, 'member_id': members[0], 'action': 'check_out'})
    assert response.status_code == 400
    assert json.loads(response.data)['kind'] == 'not_checked_in'

def test_live_unknown_action(client, instructor_headers, dojo_class, members):
    session_id = json.loads(client.post('/api/attendance/sessions', headers=instructor_headers,
                                        json={'class_id': dojo_class}).data)['data']['id']

    response = client.post('/api/attendance/live', headers=instructor_headers,
                           json={'session_id': session_id, 'member_id': members[0], 'action': 'wave'})
    assert response.status_code == 400

def test_unknown_session(client, instructor_headers, members):
    response = client.get('/api/attendance/sessions/999', headers=instructor_headers)
    assert response.status_code == 404
    assert json.loads(response.data)['kind'] == 'session_not_found'

    response = client.post('/api/attendance/live', headers=instructor_headers,
                           json={'session_id': 999, 'member_id': members[0], 'action': 'check_in'})
    assert response.status_code == 404

    response = client.post('/api/attendance/sessions/999/finalize', headers=instructor_headers)
    assert response.status_code == 404

def test_start_session_unknown_class(client, instructor_headers):
    response = client.post('/api/attendance/sessions', headers=instructor_headers, json={'class_id': 999})
    assert response.status_code == 400
    assert json.loads(response.data)['kind'] == 'invalid_class'

def test_finalize_after_duplicate_regular_record(client, instructor_headers, dojo_class, members):
    post_attendance(client, instructor_headers, member_id=members[0], class_id=dojo_class, date='2024-03-01')
    session_id = json.loads(client.post('/api/attendance/sessions', headers=instructor_headers,
                                        json={'class_id': dojo_class, 'date': '2024-03-01'}).data)['data']['id']
    client.post('/api/attendance/live', headers=instructor_headers,
                json={'session_id': session_id, 'member_id': members[0], 'action': 'check_in'})

    response = client.post(f'/api/attendance/sessions/{session_id}/finalize', headers=instructor_headers)

    assert response.status_code == 200
    db.session.expire_all()
    record = AttendanceRecord.query.one()
    assert record.attendance_type.value == 'live_update'
