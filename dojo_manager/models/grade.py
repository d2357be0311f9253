"""Belt grades, grading criteria and member progress towards them."""
from datetime import date
from enum import Enum
from dojo_manager import db
from dojo_manager.models.base import BaseModel

class ProgressStatus(Enum):
    NOT_STARTED = 'not_started'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    MASTERED = 'mastered'

class Grade(BaseModel):
    """A belt rank members progress through."""

    __tablename__ = 'grades'

    name = db.Column(db.String(100), nullable=False, unique=True)
    color = db.Column(db.String(50), nullable=False)
    order_rank = db.Column(db.Integer, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)

    criteria = db.relationship('GradeCriterion', backref='grade', lazy='dynamic',
                               order_by='GradeCriterion.criterion')

    def __repr__(self):
        return f'<Grade {self.name}>'

class GradeCriterion(BaseModel):
    """A single requirement for passing a grading."""

    __tablename__ = 'grade_criteria'

    grade_id = db.Column(db.Integer, db.ForeignKey('grades.id'), nullable=False)
    criterion = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(100), nullable=True)  # kata, kumite, kihon
    description = db.Column(db.Text, nullable=True)

class MemberProgress(BaseModel):
    """Assessment of one member against one criterion of a target grade."""

    __tablename__ = 'member_progress'
    __table_args__ = (
        db.UniqueConstraint('member_id', 'grade_criteria_id', 'target_grade_id',
                            name='uq_member_progress_criterion'),
    )

    member_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, index=True)
    grade_criteria_id = db.Column(db.Integer, db.ForeignKey('grade_criteria.id'), nullable=False)
    target_grade_id = db.Column(db.Integer, db.ForeignKey('grades.id'), nullable=False)
    status = db.Column(db.Enum(ProgressStatus), nullable=False, default=ProgressStatus.NOT_STARTED)
    notes = db.Column(db.Text, nullable=True)
    instructor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    last_assessed = db.Column(db.Date, default=date.today)

    criterion = db.relationship('GradeCriterion')
    target_grade = db.relationship('Grade')

    def to_dict(self):
        data = super().to_dict()
        data['criteria_name'] = self.criterion.criterion if self.criterion else None
        data['criteria_description'] = self.criterion.description if self.criterion else None
        data['category'] = self.criterion.category if self.criterion else None
        data['grade_name'] = self.target_grade.name if self.target_grade else None
        return data
