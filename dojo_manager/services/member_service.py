"""Member management service."""
from datetime import date
from typing import Dict, List

from flask import current_app
from sqlalchemy import or_

from dojo_manager import db
from dojo_manager.models.grade import Grade, GradeCriterion, MemberProgress, ProgressStatus
from dojo_manager.models.member import INSTRUCTOR_ROLES, Member, MemberStatus
from dojo_manager.utils.exceptions import NotFound, ValidationError
from dojo_manager.utils.helpers import parse_date
from dojo_manager.utils.validators import Validator

TEXT_FIELDS = (
    'first_name', 'last_name', 'other_names', 'gender', 'address', 'phone_number',
    'guardian_name', 'guardian_phone', 'guardian_email', 'guardian_relationship',
    'emergency_contact_name', 'emergency_contact_phone', 'emergency_contact_relationship',
    'medical_conditions', 'special_needs', 'notes'
)
FLAG_FIELDS = ('photo_permission', 'social_media_permission')

def _clean(data: Dict, partial: bool) -> Dict:
    """Validate member input and map it onto column values."""
    values = {}

    for field in TEXT_FIELDS:
        if field in data:
            value = data[field]
            values[field] = value.strip() if isinstance(value, str) else value
    for field in ('first_name', 'last_name'):
        if (field in values or not partial) and not values.get(field):
            raise ValidationError(f"{field} is required")

    if 'date_of_birth' in data or not partial:
        dob = parse_date(data.get('date_of_birth'), 'date_of_birth')
        if dob is None and not partial:
            raise ValidationError("Date of birth is required")
        values['date_of_birth'] = Validator.date_of_birth(dob)

    if data.get('email'):
        if not isinstance(data['email'], str):
            raise ValidationError("Invalid email format")
        email = data['email'].strip().lower()
        if not Validator.validate_email(email):
            raise ValidationError("Invalid email format")
        values['email'] = email
    elif 'email' in data:
        values['email'] = None

    if data.get('instructor_role'):
        values['instructor_role'] = Validator.choice(data['instructor_role'], 'instructor_role', INSTRUCTOR_ROLES)

    for field in FLAG_FIELDS:
        if field in data:
            values[field] = bool(data[field])

    if data.get('current_grade_id'):
        values['current_grade_id'] = Grade.get_or_404(
            Validator.positive_int(data['current_grade_id'], 'current_grade_id')
        ).id
    if data.get('main_dojo_id'):
        values['main_dojo_id'] = Validator.positive_int(data['main_dojo_id'], 'main_dojo_id')
    if data.get('status'):
        values['status'] = Validator.enum_value(MemberStatus, data['status'], 'status')

    return values

class MemberService:
    """Service for managing members and their grading progress."""

    @staticmethod
    def get(member_id: int) -> Member:
        member = db.session.get(Member, member_id)
        if member is None:
            raise NotFound("Member not found")
        return member

    @staticmethod
    def query(status: str = None, search: str = None):
        query = Member.query

        if status:
            query = query.filter(Member.status == Validator.enum_value(MemberStatus, status, 'status'))
        if search:
            pattern = f'%{search.strip()}%'
            query = query.filter(or_(
                Member.first_name.ilike(pattern),
                Member.last_name.ilike(pattern),
                Member.email.ilike(pattern)
            ))

        return query.order_by(Member.last_name, Member.first_name, Member.id)

    @staticmethod
    def create(data: Dict) -> Member:
        member = Member(**_clean(data, partial=False))
        db.session.add(member)
        db.session.commit()

        current_app.logger.info('Member %s created: %s', member.id, member.full_name)
        return member

    @staticmethod
    def update(member_id: int, data: Dict) -> Member:
        member = MemberService.get(member_id)
        member.update(**_clean(data, partial=True))
        return member

    @staticmethod
    def set_status(member_id: int, status: MemberStatus) -> Member:
        """Deactivation is a soft delete; history stays attached."""
        member = MemberService.get(member_id)
        member.update(status=status)

        current_app.logger.info('Member %s marked %s', member.id, status.value)
        return member

    @staticmethod
    def progress(member_id: int, target_grade_id=None) -> List[MemberProgress]:
        MemberService.get(member_id)
        query = MemberProgress.query.filter_by(member_id=member_id)
        if target_grade_id:
            query = query.filter_by(target_grade_id=Validator.positive_int(target_grade_id, 'target_grade_id'))

        return query.join(Grade, MemberProgress.target_grade_id == Grade.id).join(
            GradeCriterion, MemberProgress.grade_criteria_id == GradeCriterion.id
        ).order_by(Grade.order_rank, GradeCriterion.category, GradeCriterion.criterion).all()

    @staticmethod
    def record_progress(member_id: int, data: Dict, instructor_id: int) -> MemberProgress:
        """Insert or replace the assessment for (member, criterion, target grade)."""
        member = MemberService.get(member_id)
        Validator.require_fields(data, ['grade_criteria_id', 'target_grade_id', 'status'])
        criterion = GradeCriterion.get_or_404(Validator.positive_int(data['grade_criteria_id'], 'grade_criteria_id'))
        target_grade = Grade.get_or_404(Validator.positive_int(data['target_grade_id'], 'target_grade_id'))
        status = Validator.enum_value(ProgressStatus, data['status'], 'status')

        progress = MemberProgress.query.filter_by(
            member_id=member.id,
            grade_criteria_id=criterion.id,
            target_grade_id=target_grade.id
        ).first()
        if progress is None:
            progress = MemberProgress(
                member_id=member.id,
                grade_criteria_id=criterion.id,
                target_grade_id=target_grade.id
            )
            db.session.add(progress)

        progress.status = status
        progress.notes = data.get('notes')
        progress.instructor_id = instructor_id
        progress.last_assessed = date.today()
        db.session.commit()
        return progress
