"""Live attendance session and its check-in entries."""
from datetime import datetime
from enum import Enum
from dojo_manager import db
from dojo_manager.models.base import BaseModel
from dojo_manager.models.attendance import AttendanceStatus

class SessionStatus(Enum):
    ACTIVE = 'active'
    ENDED = 'ended'

class AttendanceSession(BaseModel):
    """An in-progress class during which members are checked in and out."""

    __tablename__ = 'attendance_sessions'

    class_id = db.Column(db.Integer, db.ForeignKey('classes.id'), nullable=False)
    instructor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    date = db.Column(db.Date, nullable=False)

    status = db.Column(db.Enum(SessionStatus), nullable=False, default=SessionStatus.ACTIVE)
    start_time = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    end_time = db.Column(db.DateTime, nullable=True)
    finalized_at = db.Column(db.DateTime, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    # Relationships
    dojo_class = db.relationship('DojoClass')
    entries = db.relationship('LiveAttendance', backref='session', lazy='dynamic',
                              order_by='LiveAttendance.check_in_time.desc()')

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    def to_dict(self):
        """Convert to dictionary."""
        data = super().to_dict()
        data['class_name'] = self.dojo_class.name if self.dojo_class else None
        return data

class LiveAttendance(BaseModel):
    """A member's check-in (and optional check-out) within a session."""

    __tablename__ = 'live_attendance'
    __table_args__ = (
        # One open entry per member and session
        db.Index(
            'uq_live_attendance_open_entry', 'session_id', 'member_id',
            unique=True,
            sqlite_where=db.text('check_out_time IS NULL'),
            postgresql_where=db.text('check_out_time IS NULL'),
        ),
    )

    session_id = db.Column(db.Integer, db.ForeignKey('attendance_sessions.id'), nullable=False, index=True)
    member_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False)
    check_in_time = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    check_out_time = db.Column(db.DateTime, nullable=True)
    status = db.Column(db.Enum(AttendanceStatus), nullable=False, default=AttendanceStatus.PRESENT)

    member = db.relationship('Member')

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None

    def to_dict(self):
        data = super().to_dict()
        member = self.member
        data['first_name'] = member.first_name if member else None
        data['last_name'] = member.last_name if member else None
        data['current_grade_id'] = member.current_grade_id if member else None
        data['grade_name'] = member.current_grade.name if member and member.current_grade else None
        data['grade_color'] = member.current_grade.color if member and member.current_grade else None
        return data
