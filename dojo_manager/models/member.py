"""Member model with personal, guardian and medical details."""
from enum import Enum
from dojo_manager import db
from dojo_manager.models.base import BaseModel

class MemberStatus(Enum):
    """Member status enumeration."""
    ACTIVE = 'active'
    INACTIVE = 'inactive'

INSTRUCTOR_ROLES = ('main_instructor', 'senior_instructor', 'developing_instructor', 'student')

class Member(BaseModel):
    """A student (or instructor) training at the dojo."""

    __tablename__ = 'members'

    # Personal Info
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False, index=True)
    other_names = db.Column(db.String(255), nullable=True)
    date_of_birth = db.Column(db.Date, nullable=True)
    gender = db.Column(db.String(20), nullable=True)
    instructor_role = db.Column(db.String(50), nullable=True)

    # Contact
    address = db.Column(db.String(500), nullable=True)
    phone_number = db.Column(db.String(50), nullable=True)
    email = db.Column(db.String(255), nullable=True)

    # Guardian (junior members)
    guardian_name = db.Column(db.String(255), nullable=True)
    guardian_phone = db.Column(db.String(50), nullable=True)
    guardian_email = db.Column(db.String(255), nullable=True)
    guardian_relationship = db.Column(db.String(100), nullable=True)

    # Emergency contact
    emergency_contact_name = db.Column(db.String(255), nullable=True)
    emergency_contact_phone = db.Column(db.String(50), nullable=True)
    emergency_contact_relationship = db.Column(db.String(100), nullable=True)

    # Medical & consent
    medical_conditions = db.Column(db.Text, nullable=True)
    special_needs = db.Column(db.Text, nullable=True)
    photo_permission = db.Column(db.Boolean, default=False)
    social_media_permission = db.Column(db.Boolean, default=False)
    notes = db.Column(db.Text, nullable=True)

    # Training
    current_grade_id = db.Column(db.Integer, db.ForeignKey('grades.id'), nullable=True)
    main_dojo_id = db.Column(db.Integer, db.ForeignKey('dojos.id'), nullable=True)
    status = db.Column(db.Enum(MemberStatus), nullable=False, default=MemberStatus.ACTIVE)

    # Relationships
    current_grade = db.relationship('Grade')
    main_dojo = db.relationship('Dojo', backref=db.backref('members', lazy='dynamic'))
    progress = db.relationship('MemberProgress', backref='member', lazy='dynamic')

    @property
    def full_name(self) -> str:
        return f'{self.first_name} {self.last_name}'

    def to_dict(self):
        """Convert to dictionary."""
        data = super().to_dict()
        data['current_grade'] = self.current_grade.name if self.current_grade else None
        data['grade_color'] = self.current_grade.color if self.current_grade else None
        return data

    def __repr__(self):
        return f'<Member {self.full_name}>'
