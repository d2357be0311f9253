"""Recurring class on the weekly timetable."""
from dojo_manager import db
from dojo_manager.models.base import BaseModel

WEEK_DAYS = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday')
CLASS_TYPES = ('regular', 'junior', 'senior', 'advanced', 'special')

class DojoClass(BaseModel):
    """Class model."""

    __tablename__ = 'classes'

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    instructor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    dojo_id = db.Column(db.Integer, db.ForeignKey('dojos.id'), nullable=True)

    # Time Info
    day_of_week = db.Column(db.String(10), nullable=False)
    start_time = db.Column(db.String(5), nullable=False)  # HH:MM
    end_time = db.Column(db.String(5), nullable=False)
    duration_hours = db.Column(db.Float, nullable=False, default=1.0)

    class_type = db.Column(db.String(20), nullable=False, default='regular')
    max_participants = db.Column(db.Integer, nullable=True)
    active = db.Column(db.Boolean, default=True, nullable=False)

    # Relationships
    instructor = db.relationship('User')
    dojo = db.relationship('Dojo', backref=db.backref('classes', lazy='dynamic'))

    def to_dict(self):
        """Convert to dictionary."""
        data = super().to_dict()
        data['instructor_email'] = self.instructor.email if self.instructor else None
        data['dojo_name'] = self.dojo.name if self.dojo else None
        return data

    def __repr__(self):
        return f'<DojoClass {self.name}>'
