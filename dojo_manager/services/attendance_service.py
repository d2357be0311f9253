"""Attendance record store: regular and backdated entry, history queries and
manual adjustment.

All creation paths rely on the ``uq_attendance_member_class_date`` constraint
for duplicate detection; the resulting ``IntegrityError`` is reported as
``DuplicateRecord``.
"""
import io
from datetime import date, datetime
from typing import Dict, List, Optional

import pandas as pd
from flask import current_app
from sqlalchemy.exc import IntegrityError

from dojo_manager import db
from dojo_manager.models.attendance import AttendanceRecord, AttendanceStatus, AttendanceType
from dojo_manager.models.dojo_class import DojoClass
from dojo_manager.models.member import Member
from dojo_manager.utils.exceptions import (
    DuplicateRecord, InvalidClass, MissingReason, RecordNotFound, ValidationError
)
from dojo_manager.utils.helpers import parse_date, parse_datetime
from dojo_manager.utils.validators import Validator

CSV_COLUMNS = ['Date', 'Member', 'Class', 'Status', 'Hours', 'Check In', 'Check Out', 'Type', 'Notes']

def require_reason(reason: Optional[str]) -> str:
    """Return the stripped justification or raise MissingReason."""
    if reason is None or not str(reason).strip():
        raise MissingReason()
    return str(reason).strip()

def resolve_class(class_id) -> DojoClass:
    class_id = Validator.positive_int(class_id, 'class_id')
    dojo_class = db.session.get(DojoClass, class_id)
    if dojo_class is None:
        raise InvalidClass(f"Class {class_id} does not exist")
    return dojo_class

def require_member(member_id) -> Member:
    member_id = Validator.positive_int(member_id, 'member_id')
    member = db.session.get(Member, member_id)
    if member is None:
        raise ValidationError(f"Member {member_id} does not exist")
    return member

def class_duration(dojo_class: DojoClass) -> float:
    """Configured length of a class, used when hours are not supplied."""
    if dojo_class.duration_hours is not None:
        return dojo_class.duration_hours
    return current_app.config['DEFAULT_CLASS_DURATION_HOURS']

def validate_hours(hours) -> Optional[float]:
    if hours is None or hours == '':
        return None
    return Validator.number_in_range(hours, 'hours_attended', 0, current_app.config['MAX_HOURS_ATTENDED'])

def validate_times(check_in: Optional[datetime], check_out: Optional[datetime]) -> None:
    if check_in and check_out and check_out < check_in:
        raise ValidationError("check_out_time cannot be before check_in_time")

class AttendanceService:
    """Creates, queries and adjusts attendance records."""

    @staticmethod
    def _insert(record: AttendanceRecord) -> AttendanceRecord:
        db.session.add(record)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise DuplicateRecord()
        return record

    @staticmethod
    def create_regular(
        member_id: int,
        class_id: int,
        attendance_date,
        status='present',
        hours_attended=None,
        notes: str = None,
        now: datetime = None
    ) -> AttendanceRecord:
        """Record same-day attendance taken by an instructor."""
        attendance_date = parse_date(attendance_date)
        if attendance_date is None:
            raise ValidationError("date is required")
        status = Validator.enum_value(AttendanceStatus, status or 'present', 'status')
        hours = validate_hours(hours_attended)

        member = require_member(member_id)
        dojo_class = resolve_class(class_id)
        if hours is None:
            hours = class_duration(dojo_class)

        check_in_time = (now or datetime.utcnow()) if status == AttendanceStatus.PRESENT else None

        record = AttendanceRecord(
            member_id=member.id,
            class_id=dojo_class.id,
            date=attendance_date,
            status=status,
            hours_attended=hours,
            check_in_time=check_in_time,
            attendance_type=AttendanceType.REGULAR,
            notes=notes
        )
        return AttendanceService._insert(record)

    @staticmethod
    def create_backdated(
        member_id: int,
        class_id: int,
        attendance_date,
        status,
        adjustment_reason: str,
        adjusted_by: int,
        hours_attended=None,
        check_in_time=None,
        check_out_time=None,
        notes: str = None,
        today: date = None
    ) -> AttendanceRecord:
        """Record attendance for a past date; a justification is mandatory."""
        reason = require_reason(adjustment_reason)

        attendance_date = parse_date(attendance_date)
        if attendance_date is None:
            raise ValidationError("date is required")
        if attendance_date > (today or date.today()):
            raise ValidationError("Backdated attendance cannot be recorded for a future date")
        if status is None:
            raise ValidationError("status is required")
        status = Validator.enum_value(AttendanceStatus, status, 'status')
        hours = validate_hours(hours_attended)
        check_in = parse_datetime(check_in_time, 'check_in_time')
        check_out = parse_datetime(check_out_time, 'check_out_time')
        validate_times(check_in, check_out)

        member = require_member(member_id)
        dojo_class = resolve_class(class_id)
        if hours is None:
            hours = class_duration(dojo_class)

        record = AttendanceRecord(
            member_id=member.id,
            class_id=dojo_class.id,
            date=attendance_date,
            status=status,
            hours_attended=hours,
            check_in_time=check_in,
            check_out_time=check_out,
            attendance_type=AttendanceType.BACKDATED,
            adjusted_by=adjusted_by,
            adjustment_reason=reason,
            notes=notes
        )
        record = AttendanceService._insert(record)

        current_app.logger.info(
            'Backdated attendance %s for member %s on %s recorded by user %s: %s',
            record.id, record.member_id, record.date, adjusted_by, reason
        )
        return record

    @staticmethod
    def get(record_id: int) -> AttendanceRecord:
        record = db.session.get(AttendanceRecord, record_id)
        if record is None:
            raise RecordNotFound()
        return record

    @staticmethod
    def adjust(
        record_id: int,
        adjustment_reason: str,
        adjusted_by: int,
        status=None,
        hours_attended=None,
        check_in_time=None,
        check_out_time=None,
        notes: str = None
    ) -> AttendanceRecord:
        """Apply a manual correction to an existing record.

        Only the supplied fields change. The record is always re-tagged as a
        manual adjustment and stamped with who changed it and why.
        """
        reason = require_reason(adjustment_reason)
        record = AttendanceService.get(record_id)

        if status is not None:
            status = Validator.enum_value(AttendanceStatus, status, 'status')
        hours = validate_hours(hours_attended)
        check_in = parse_datetime(check_in_time, 'check_in_time')
        check_out = parse_datetime(check_out_time, 'check_out_time')
        validate_times(check_in or record.check_in_time, check_out or record.check_out_time)

        if status is not None:
            record.status = status
        if hours is not None:
            record.hours_attended = hours
        if check_in is not None:
            record.check_in_time = check_in
        if check_out is not None:
            record.check_out_time = check_out
        if notes is not None:
            record.notes = notes

        previous_type = record.attendance_type
        record.attendance_type = AttendanceType.MANUAL_ADJUSTMENT
        record.adjusted_by = adjusted_by
        record.adjustment_reason = reason
        db.session.commit()

        current_app.logger.info(
            'Attendance %s adjusted by user %s (was %s): %s',
            record.id, adjusted_by, previous_type.value, reason
        )
        return record

    @staticmethod
    def query(
        member_id=None,
        class_id=None,
        date_from=None,
        date_to=None,
        status=None,
        attendance_type=None
    ):
        """Build the history query; every filter is optional and combinable."""
        query = AttendanceRecord.query

        if member_id:
            query = query.filter(AttendanceRecord.member_id == Validator.positive_int(member_id, 'member_id'))
        if class_id:
            query = query.filter(AttendanceRecord.class_id == Validator.positive_int(class_id, 'class_id'))

        date_from = parse_date(date_from, 'date_from')
        date_to = parse_date(date_to, 'date_to')
        if date_from:
            query = query.filter(AttendanceRecord.date >= date_from)
        if date_to:
            query = query.filter(AttendanceRecord.date <= date_to)

        if status:
            query = query.filter(
                AttendanceRecord.status == Validator.enum_value(AttendanceStatus, status, 'status')
            )
        if attendance_type:
            query = query.filter(
                AttendanceRecord.attendance_type == Validator.enum_value(
                    AttendanceType, attendance_type, 'attendance_type'
                )
            )

        return query.order_by(
            AttendanceRecord.date.desc(),
            AttendanceRecord.check_in_time.desc(),
            AttendanceRecord.id.desc()
        )

    @staticmethod
    def paginate(filters: Dict, page: int = 1, per_page: int = 50):
        return AttendanceService.query(**filters).paginate(
            page=page,
            per_page=per_page,
            error_out=False
        )

    @staticmethod
    def class_roster(class_id: int, attendance_date) -> List[AttendanceRecord]:
        """Records of one class on one date, ordered by member name."""
        attendance_date = parse_date(attendance_date)
        return AttendanceRecord.query.join(Member, AttendanceRecord.member_id == Member.id).filter(
            AttendanceRecord.class_id == class_id,
            AttendanceRecord.date == attendance_date
        ).order_by(Member.last_name, Member.first_name).all()

    @staticmethod
    def export_csv(filters: Dict) -> str:
        """Render the filtered history as CSV."""
        rows = []
        for record in AttendanceService.query(**filters).all():
            rows.append({
                'Date': record.date.isoformat(),
                'Member': record.member.full_name if record.member else '',
                'Class': record.dojo_class.name if record.dojo_class else '',
                'Status': record.status.value,
                'Hours': record.hours_attended,
                'Check In': record.check_in_time.isoformat() if record.check_in_time else '',
                'Check Out': record.check_out_time.isoformat() if record.check_out_time else '',
                'Type': record.attendance_type.value,
                'Notes': record.notes or ''
            })

        df = pd.DataFrame(rows, columns=CSV_COLUMNS)

        output = io.StringIO()
        df.to_csv(output, index=False)
        return output.getvalue()
