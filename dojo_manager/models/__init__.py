"""Models package with all models."""
from .base import BaseModel
from .user import User, UserRole
from .dojo import Dojo
from .grade import Grade, GradeCriterion, MemberProgress, ProgressStatus
from .member import Member, MemberStatus
from .dojo_class import DojoClass
from .payment import Payment
from .attendance import AttendanceRecord, AttendanceStatus, AttendanceType
from .attendance_session import AttendanceSession, LiveAttendance, SessionStatus

__all__ = [
    'BaseModel', 'User', 'UserRole',
    'Dojo', 'Grade', 'GradeCriterion', 'MemberProgress', 'ProgressStatus',
    'Member', 'MemberStatus', 'DojoClass', 'Payment',
    'AttendanceRecord', 'AttendanceStatus', 'AttendanceType',
    'AttendanceSession', 'LiveAttendance', 'SessionStatus'
]
