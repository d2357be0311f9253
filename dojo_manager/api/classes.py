"""Class timetable API."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from sqlalchemy import case

from dojo_manager import db
from dojo_manager.models.dojo import Dojo
from dojo_manager.models.dojo_class import CLASS_TYPES, WEEK_DAYS, DojoClass
from dojo_manager.models.user import User
from dojo_manager.utils.decorators import instructor_required
from dojo_manager.utils.exceptions import NotFound, ValidationError
from dojo_manager.utils.helpers import get_json_body, success_response
from dojo_manager.utils.validators import Validator

classes_bp = Blueprint('classes', __name__)

# Monday first rather than alphabetical
DAY_ORDER = case({day: index for index, day in enumerate(WEEK_DAYS)}, value=DojoClass.day_of_week)

@classes_bp.route('/', methods=['GET'])
@jwt_required()
def get_classes():
    """List classes filtered by active flag, instructor and dojo."""
    query = DojoClass.query

    active = request.args.get('active')
    if active is not None:
        query = query.filter(DojoClass.active == (active.lower() == 'true'))

    instructor_id = request.args.get('instructor_id')
    if instructor_id:
        query = query.filter(DojoClass.instructor_id == Validator.positive_int(instructor_id, 'instructor_id'))

    dojo_id = request.args.get('dojo_id')
    if dojo_id:
        query = query.filter(DojoClass.dojo_id == Validator.positive_int(dojo_id, 'dojo_id'))

    classes = query.order_by(DAY_ORDER, DojoClass.start_time).all()
    return success_response(data=[dojo_class.to_dict() for dojo_class in classes])

@classes_bp.route('/<int:class_id>', methods=['GET'])
@jwt_required()
def get_class(class_id):
    dojo_class = db.session.get(DojoClass, class_id)
    if dojo_class is None:
        raise NotFound("Class not found")
    return success_response(data=dojo_class.to_dict())

@classes_bp.route('/', methods=['POST'])
@jwt_required()
@instructor_required
def create_class():
    data = get_json_body()
    Validator.require_fields(data, ['name', 'instructor_id', 'day_of_week', 'start_time', 'end_time'])

    instructor_id = Validator.positive_int(data['instructor_id'], 'instructor_id')
    if db.session.get(User, instructor_id) is None:
        raise ValidationError(f"Instructor {instructor_id} does not exist")

    dojo_id = None
    if data.get('dojo_id'):
        dojo_id = Dojo.get_or_404(Validator.positive_int(data['dojo_id'], 'dojo_id')).id

    duration = data.get('duration_hours')
    duration = 1.0 if duration in (None, '') else Validator.number_in_range(duration, 'duration_hours', 0.25, 8)

    max_participants = data.get('max_participants')
    if max_participants not in (None, ''):
        max_participants = Validator.positive_int(max_participants, 'max_participants')
    else:
        max_participants = None

    dojo_class = DojoClass(
        name=data['name'].strip(),
        description=data.get('description'),
        instructor_id=instructor_id,
        dojo_id=dojo_id,
        day_of_week=Validator.choice(str(data['day_of_week']).lower(), 'day_of_week', WEEK_DAYS),
        start_time=Validator.time_of_day(data['start_time'], 'start_time'),
        end_time=Validator.time_of_day(data['end_time'], 'end_time'),
        duration_hours=duration,
        class_type=Validator.choice(data.get('class_type') or 'regular', 'class_type', CLASS_TYPES),
        max_participants=max_participants
    )
    db.session.add(dojo_class)
    db.session.commit()

    return success_response(data=dojo_class.to_dict(), message="Class created successfully"), 201
