"""Finalized attendance records."""
from enum import Enum
from dojo_manager import db
from dojo_manager.models.base import BaseModel

class AttendanceStatus(Enum):
    PRESENT = 'present'
    ABSENT = 'absent'
    LATE = 'late'
    LEFT_EARLY = 'left_early'
    EXCUSED = 'excused'

class AttendanceType(Enum):
    """Provenance of a record: the path that created or last touched it."""
    REGULAR = 'regular'
    BACKDATED = 'backdated'
    MANUAL_ADJUSTMENT = 'manual_adjustment'
    LIVE_UPDATE = 'live_update'

class AttendanceRecord(BaseModel):
    """One member's attendance at one class on one date."""

    __tablename__ = 'attendance'
    __table_args__ = (
        db.UniqueConstraint('member_id', 'class_id', 'date', name='uq_attendance_member_class_date'),
        db.CheckConstraint('hours_attended >= 0 AND hours_attended <= 24', name='ck_attendance_hours'),
    )

    member_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, index=True)
    class_id = db.Column(db.Integer, db.ForeignKey('classes.id'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)

    status = db.Column(db.Enum(AttendanceStatus), nullable=False, default=AttendanceStatus.PRESENT)
    hours_attended = db.Column(db.Float, nullable=False)
    check_in_time = db.Column(db.DateTime, nullable=True)
    check_out_time = db.Column(db.DateTime, nullable=True)

    attendance_type = db.Column(db.Enum(AttendanceType), nullable=False, default=AttendanceType.REGULAR)

    # Audit trail, only for backdated and manually adjusted records
    adjusted_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    adjustment_reason = db.Column(db.Text, nullable=True)

    notes = db.Column(db.Text, nullable=True)

    # Relationships
    member = db.relationship('Member', backref=db.backref('attendance_records', lazy='dynamic'))
    dojo_class = db.relationship('DojoClass', backref=db.backref('attendance_records', lazy='dynamic'))
    adjuster = db.relationship('User')

    def to_dict(self):
        """Convert to dictionary with member and class names."""
        data = super().to_dict()
        data['first_name'] = self.member.first_name if self.member else None
        data['last_name'] = self.member.last_name if self.member else None
        data['current_grade_id'] = self.member.current_grade_id if self.member else None
        grade = self.member.current_grade if self.member else None
        data['grade_name'] = grade.name if grade else None
        data['grade_color'] = grade.color if grade else None
        data['class_name'] = self.dojo_class.name if self.dojo_class else None
        data['adjusted_by_email'] = self.adjuster.email if self.adjuster else None
        return data

    def __repr__(self):
        return f'<AttendanceRecord {self.member_id}-{self.class_id}-{self.date}>'
