"""Live session lifecycle and finalization into attendance records."""
from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from dojo_manager import db
from dojo_manager.models.attendance import AttendanceRecord, AttendanceStatus, AttendanceType
from dojo_manager.models.attendance_session import AttendanceSession, LiveAttendance, SessionStatus
from dojo_manager.services.attendance_service import AttendanceService
from dojo_manager.services.live_session_service import LiveSessionService
from dojo_manager.services.session_finalizer import SessionFinalizer, hours_between
from dojo_manager.utils.exceptions import (
    AlreadyCheckedIn, InvalidClass, NotCheckedIn, SessionNotActive, SessionNotFound, ValidationError
)
from dojo_manager.utils.helpers import parse_datetime

@pytest.fixture
def session_id(users, dojo_class):
    session = LiveSessionService.start(dojo_class, '2024-01-10', instructor_id=users['instructor'])
    return session.id

def test_start_session(users, dojo_class):
    session = LiveSessionService.start(dojo_class, '2024-01-10', instructor_id=users['instructor'])

    assert session.status == SessionStatus.ACTIVE
    assert session.start_time is not None
    assert session.end_time is None
    assert session.to_dict()['class_name'] == 'Adult Karate'

def test_start_session_unknown_class(users):
    with pytest.raises(InvalidClass):
        LiveSessionService.start(999, '2024-01-10', instructor_id=users['instructor'])

def test_get_missing_session(app):
    with pytest.raises(SessionNotFound):
        LiveSessionService.get(12345)

def test_check_in_twice_fails(session_id, members):
    LiveSessionService.check_in(session_id, members[0])

    with pytest.raises(AlreadyCheckedIn):
        LiveSessionService.check_in(session_id, members[0])

    assert LiveAttendance.query.filter_by(session_id=session_id).count() == 1

def test_check_in_after_check_out_opens_new_entry(session_id, members):
    LiveSessionService.check_in(session_id, members[0])
    LiveSessionService.check_out(session_id, members[0])
    LiveSessionService.check_in(session_id, members[0])

    entries = LiveSessionService.list_live(session_id)
    assert len(entries['checked_in']) == 1
    assert len(entries['checked_out']) == 1

def test_check_in_unknown_member(session_id):
    with pytest.raises(ValidationError):
        LiveSessionService.check_in(session_id, 999)

def test_check_out_without_check_in(session_id, members):
    with pytest.raises(NotCheckedIn):
        LiveSessionService.check_out(session_id, members[0])

def test_check_out_twice(session_id, members):
    LiveSessionService.check_in(session_id, members[0])
    LiveSessionService.check_out(session_id, members[0])

    with pytest.raises(NotCheckedIn):
        LiveSessionService.check_out(session_id, members[0])

def test_check_out_sets_left_early(session_id, members):
    LiveSessionService.check_in(session_id, members[0])
    entry = LiveSessionService.check_out(session_id, members[0])

    assert entry.check_out_time is not None
    assert entry.status == AttendanceStatus.LEFT_EARLY

def test_list_live_partitions_entries(session_id, members):
    for member_id in members:
        LiveSessionService.check_in(session_id, member_id)
    LiveSessionService.check_out(session_id, members[1])

    entries = LiveSessionService.list_live(session_id)

    assert sorted(entry.member_id for entry in entries['checked_in']) == sorted([members[0], members[2]])
    assert [entry.member_id for entry in entries['checked_out']] == [members[1]]

def test_end_session(session_id):
    session = LiveSessionService.end(session_id)

    assert session.status == SessionStatus.ENDED
    assert session.end_time is not None

def test_end_session_twice_is_rejected(session_id):
    ended = LiveSessionService.end(session_id, now=datetime(2024, 1, 10, 19, 30))

    with pytest.raises(SessionNotActive):
        LiveSessionService.end(session_id, now=datetime(2024, 1, 10, 20, 0))

    assert db.session.get(AttendanceSession, ended.id).end_time == datetime(2024, 1, 10, 19, 30)

def test_no_check_in_after_end(session_id, members):
    LiveSessionService.end(session_id)

    with pytest.raises(SessionNotActive):
        LiveSessionService.check_in(session_id, members[0])

def test_check_out_allowed_after_end(session_id, members):
    LiveSessionService.check_in(session_id, members[0])
    LiveSessionService.end(session_id)

    entry = LiveSessionService.check_out(session_id, members[0])
    assert entry.check_out_time is not None

def test_hours_between(app):
    assert hours_between(parse_datetime('2024-01-10T18:00:00Z'), parse_datetime('2024-01-10T19:15:00Z')) == 1.25
    assert hours_between(datetime(2024, 1, 10, 18, 0), datetime(2024, 1, 10, 18, 20)) == 0.33
    assert hours_between(datetime(2024, 1, 10, 18, 0), datetime(2024, 1, 12, 18, 0)) == 24

def test_finalize_computes_hours_from_check_times(session_id, members):
    LiveSessionService.check_in(session_id, members[0], now=parse_datetime('2024-01-10T18:00:00Z'))
    LiveSessionService.check_out(session_id, members[0], now=parse_datetime('2024-01-10T19:15:00Z'))

    summary = SessionFinalizer.finalize(session_id)

    assert summary['records_processed'] == 1
    assert summary['failed'] == 0
    record = AttendanceRecord.query.filter_by(member_id=members[0]).one()
    assert record.hours_attended == 1.25
    assert record.status == AttendanceStatus.LEFT_EARLY
    assert record.check_in_time == datetime(2024, 1, 10, 18, 0)
    assert record.check_out_time == datetime(2024, 1, 10, 19, 15)

def test_finalize_open_entry_uses_class_duration(session_id, members):
    LiveSessionService.check_in(session_id, members[0])

    SessionFinalizer.finalize(session_id)

    record = AttendanceRecord.query.filter_by(member_id=members[0]).one()
    assert record.hours_attended == 1.5
    assert record.status == AttendanceStatus.PRESENT
    assert record.check_out_time is None

def test_finalize_closes_session(session_id, members):
    LiveSessionService.check_in(session_id, members[0])

    SessionFinalizer.finalize(session_id, now=datetime(2024, 1, 10, 19, 45))

    session = db.session.get(AttendanceSession, session_id)
    assert session.status == SessionStatus.ENDED
    assert session.end_time == datetime(2024, 1, 10, 19, 45)
    assert session.finalized_at == datetime(2024, 1, 10, 19, 45)

def test_finalize_keeps_end_time_of_ended_session(session_id, members):
    LiveSessionService.check_in(session_id, members[0])
    LiveSessionService.end(session_id, now=datetime(2024, 1, 10, 19, 30))

    SessionFinalizer.finalize(session_id, now=datetime(2024, 1, 10, 21, 0))

    session = db.session.get(AttendanceSession, session_id)
    assert session.end_time == datetime(2024, 1, 10, 19, 30)
    assert session.finalized_at == datetime(2024, 1, 10, 21, 0)

def test_finalize_overwrites_existing_record(users, dojo_class, session_id, members):
    existing = AttendanceService.create_backdated(
        members[0], dojo_class, '2024-01-10', 'absent', adjustment_reason='Marked absent by mistake',
        adjusted_by=users['instructor']
    )
    LiveSessionService.check_in(session_id, members[0])

    SessionFinalizer.finalize(session_id)

    db.session.expire_all()
    record = db.session.get(AttendanceRecord, existing.id)
    assert AttendanceRecord.query.count() == 1
    assert record.attendance_type == AttendanceType.LIVE_UPDATE
    assert record.status == AttendanceStatus.PRESENT
    assert record.adjusted_by is None
    assert record.adjustment_reason is None
    assert record.notes == 'Live session attendance'

def test_finalize_twice_is_idempotent(session_id, members):
    LiveSessionService.check_in(session_id, members[0])
    LiveSessionService.check_in(session_id, members[1])

    first = SessionFinalizer.finalize(session_id)
    second = SessionFinalizer.finalize(session_id)

    assert first['records_processed'] == second['records_processed'] == 2
    assert AttendanceRecord.query.count() == 2

def test_finalize_later_entry_wins(session_id, members):
    LiveSessionService.check_in(session_id, members[0], now=datetime(2024, 1, 10, 18, 0))
    LiveSessionService.check_out(session_id, members[0], now=datetime(2024, 1, 10, 18, 30))
    LiveSessionService.check_in(session_id, members[0], now=datetime(2024, 1, 10, 18, 45))
    LiveSessionService.check_out(session_id, members[0], now=datetime(2024, 1, 10, 19, 45))

    summary = SessionFinalizer.finalize(session_id)

    assert summary['records_processed'] == 2
    record = AttendanceRecord.query.one()
    assert record.check_in_time == datetime(2024, 1, 10, 18, 45)
    assert record.hours_attended == 1.0

def test_finalize_some_entries_fail(monkeypatch, session_id, members):
    for member_id in members:
        LiveSessionService.check_in(session_id, member_id)

    original_upsert = SessionFinalizer._upsert
    failing_member = members[1]

    def flaky_upsert(session, entry, hours):
        if entry['member_id'] == failing_member:
            raise OperationalError('INSERT INTO attendance', {}, Exception('database is locked'))
        return original_upsert(session, entry, hours)

    monkeypatch.setattr(SessionFinalizer, '_upsert', staticmethod(flaky_upsert))

    summary = SessionFinalizer.finalize(session_id)

    assert summary['records_processed'] == 2
    assert summary['failed'] == 1
    failures = [result for result in summary['results'] if not result['success']]
    assert failures[0]['member_id'] == failing_member
    assert 'database is locked' in failures[0]['error']
    assert sorted(record.member_id for record in AttendanceRecord.query.all()) == sorted([members[0], members[2]])
    assert db.session.get(AttendanceSession, session_id).finalized_at is not None

def test_finalize_missing_session(app):
    with pytest.raises(SessionNotFound):
        SessionFinalizer.finalize(999)

def test_live_session_end_to_end(users, dojo_class, members):
    session = LiveSessionService.start(dojo_class, '2024-03-01', instructor_id=users['instructor'])
    LiveSessionService.check_in(session.id, members[2])
    LiveSessionService.check_out(session.id, members[2])
    SessionFinalizer.finalize(session.id)

    records = AttendanceService.query(class_id=dojo_class, date_from='2024-03-01', date_to='2024-03-01').all()

    assert len(records) == 1
    assert records[0].member_id == members[2]
    assert records[0].attendance_type == AttendanceType.LIVE_UPDATE
    assert records[0].status == AttendanceStatus.LEFT_EARLY
