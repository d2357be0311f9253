"""Live attendance sessions: start, check members in and out, end."""
from datetime import datetime
from typing import Dict, List

from flask import current_app
from sqlalchemy.exc import IntegrityError

from dojo_manager import db
from dojo_manager.models.attendance import AttendanceStatus
from dojo_manager.models.attendance_session import AttendanceSession, LiveAttendance, SessionStatus
from dojo_manager.services.attendance_service import require_member, resolve_class
from dojo_manager.utils.exceptions import (
    AlreadyCheckedIn, NotCheckedIn, SessionNotActive, SessionNotFound, ValidationError
)
from dojo_manager.utils.helpers import parse_date
from dojo_manager.utils.validators import Validator

class LiveSessionService:
    """State machine for a class session: active -> ended."""

    @staticmethod
    def start(class_id: int, session_date, instructor_id: int = None, notes: str = None,
              now: datetime = None) -> AttendanceSession:
        """Open a session for a class on a date."""
        session_date = parse_date(session_date)
        if session_date is None:
            raise ValidationError("date is required")
        dojo_class = resolve_class(class_id)

        session = AttendanceSession(
            class_id=dojo_class.id,
            instructor_id=instructor_id,
            date=session_date,
            status=SessionStatus.ACTIVE,
            start_time=now or datetime.utcnow(),
            notes=notes
        )
        db.session.add(session)
        db.session.commit()

        current_app.logger.info(
            'Attendance session %s started for class %s on %s by user %s',
            session.id, session.class_id, session.date, instructor_id
        )
        return session

    @staticmethod
    def get(session_id: int) -> AttendanceSession:
        session = db.session.get(AttendanceSession, session_id)
        if session is None:
            raise SessionNotFound()
        return session

    @staticmethod
    def open_entry(session_id: int, member_id: int) -> LiveAttendance:
        return LiveAttendance.query.filter_by(
            session_id=session_id,
            member_id=member_id,
            check_out_time=None
        ).first()

    @staticmethod
    def check_in(session_id: int, member_id: int, now: datetime = None) -> LiveAttendance:
        session = LiveSessionService.get(Validator.positive_int(session_id, 'session_id'))
        if not session.is_active:
            raise SessionNotActive("Session is not active; check-in is closed")

        member = require_member(member_id)
        if LiveSessionService.open_entry(session.id, member.id):
            raise AlreadyCheckedIn()

        entry = LiveAttendance(
            session_id=session.id,
            member_id=member.id,
            check_in_time=now or datetime.utcnow(),
            status=AttendanceStatus.PRESENT
        )
        db.session.add(entry)
        try:
            db.session.commit()
        except IntegrityError:
            # Lost a race against a concurrent check-in for the same member
            db.session.rollback()
            raise AlreadyCheckedIn()
        return entry

    @staticmethod
    def check_out(session_id: int, member_id: int, now: datetime = None) -> LiveAttendance:
        session = LiveSessionService.get(Validator.positive_int(session_id, 'session_id'))
        member_id = Validator.positive_int(member_id, 'member_id')

        entry = LiveSessionService.open_entry(session.id, member_id)
        if entry is None:
            raise NotCheckedIn()

        entry.check_out_time = now or datetime.utcnow()
        entry.status = AttendanceStatus.LEFT_EARLY
        db.session.commit()
        return entry

    @staticmethod
    def end(session_id: int, now: datetime = None) -> AttendanceSession:
        """Close check-in. Ending a session that already ended is an error."""
        session = LiveSessionService.get(session_id)
        if not session.is_active:
            raise SessionNotActive("Session has already ended")

        session.status = SessionStatus.ENDED
        session.end_time = now or datetime.utcnow()
        db.session.commit()

        current_app.logger.info('Attendance session %s ended', session.id)
        return session

    @staticmethod
    def list_live(session_id: int) -> Dict[str, List[LiveAttendance]]:
        """Entries of a session split into checked-in and checked-out members."""
        session = LiveSessionService.get(session_id)
        entries = session.entries.all()

        return {
            'checked_in': [entry for entry in entries if entry.is_open],
            'checked_out': [entry for entry in entries if not entry.is_open]
        }
