"""Promotes a live session's check-ins into permanent attendance records."""
from datetime import datetime
from typing import Dict, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from dojo_manager import db
from dojo_manager.models.attendance import AttendanceRecord, AttendanceType
from dojo_manager.models.attendance_session import AttendanceSession, LiveAttendance, SessionStatus
from dojo_manager.services.attendance_service import class_duration
from dojo_manager.services.live_session_service import LiveSessionService

def hours_between(check_in: datetime, check_out: datetime) -> float:
    """Elapsed hours rounded to two places, clamped to the allowed range."""
    hours = (check_out - check_in).total_seconds() / 3600
    hours = min(max(hours, 0.0), current_app.config['MAX_HOURS_ATTENDED'])
    return round(hours, 2)

class SessionFinalizer:
    """Best-effort promotion: every live entry is committed on its own.

    A failing entry is rolled back and reported; the others still land.
    """

    @staticmethod
    def _upsert(session: Dict, entry: Dict, hours: float) -> AttendanceRecord:
        """Insert or replace the record keyed on (member, class, date)."""
        record = AttendanceRecord.query.filter_by(
            member_id=entry['member_id'],
            class_id=session['class_id'],
            date=session['date']
        ).first()
        if record is None:
            record = AttendanceRecord(
                member_id=entry['member_id'],
                class_id=session['class_id'],
                date=session['date']
            )
            db.session.add(record)

        record.check_in_time = entry['check_in_time']
        record.check_out_time = entry['check_out_time']
        record.hours_attended = hours
        record.status = entry['status']
        record.attendance_type = AttendanceType.LIVE_UPDATE
        record.adjusted_by = None
        record.adjustment_reason = None
        record.notes = current_app.config['LIVE_SESSION_NOTE']
        db.session.flush()
        return record

    @staticmethod
    def finalize(session_id: int, now: Optional[datetime] = None) -> Dict:
        session = LiveSessionService.get(session_id)
        default_hours = class_duration(session.dojo_class)

        # Plain snapshots; a rollback expires every loaded instance
        session_info = {'id': session.id, 'class_id': session.class_id, 'date': session.date}
        entries = [
            {
                'id': entry.id,
                'member_id': entry.member_id,
                'check_in_time': entry.check_in_time,
                'check_out_time': entry.check_out_time,
                'status': entry.status
            }
            for entry in session.entries.order_by(None).order_by(LiveAttendance.check_in_time, LiveAttendance.id).all()
        ]

        results = []
        for entry in entries:
            if entry['check_out_time'] is not None:
                hours = hours_between(entry['check_in_time'], entry['check_out_time'])
            else:
                hours = default_hours

            try:
                record = SessionFinalizer._upsert(session_info, entry, hours)
                db.session.commit()
            except SQLAlchemyError as e:
                db.session.rollback()
                current_app.logger.error(
                    'Failed to finalize live entry %s (member %s) of session %s: %s',
                    entry['id'], entry['member_id'], session_info['id'], e
                )
                results.append({
                    'live_attendance_id': entry['id'],
                    'member_id': entry['member_id'],
                    'success': False,
                    'error': str(e)
                })
            else:
                results.append({
                    'live_attendance_id': entry['id'],
                    'member_id': entry['member_id'],
                    'success': True,
                    'attendance_id': record.id,
                    'hours_attended': hours
                })

        now = now or datetime.utcnow()
        session = db.session.get(AttendanceSession, session_info['id'])
        if session.status == SessionStatus.ACTIVE:
            session.status = SessionStatus.ENDED
            session.end_time = now
        session.finalized_at = now
        db.session.commit()

        failed = sum(1 for result in results if not result['success'])
        current_app.logger.info(
            'Attendance session %s finalized: %s processed, %s failed',
            session_info['id'], len(results) - failed, failed
        )
        return {
            'session_id': session_info['id'],
            'records_processed': len(results) - failed,
            'failed': failed,
            'results': results
        }
