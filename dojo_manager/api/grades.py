"""Belt grades API."""
from flask import Blueprint
from flask_jwt_extended import jwt_required

from dojo_manager.models.grade import Grade
from dojo_manager.utils.helpers import success_response

grades_bp = Blueprint('grades', __name__)

@grades_bp.route('/', methods=['GET'])
@jwt_required()
def get_grades():
    grades = Grade.query.order_by(Grade.order_rank).all()
    return success_response(data=[grade.to_dict() for grade in grades])

@grades_bp.route('/<int:grade_id>/criteria', methods=['GET'])
@jwt_required()
def get_grade_criteria(grade_id):
    """Requirements for passing a grading."""
    grade = Grade.get_or_404(grade_id)
    return success_response(data=[criterion.to_dict() for criterion in grade.criteria])
