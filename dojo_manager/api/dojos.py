"""Dojo locations API."""
from flask import Blueprint
from flask_jwt_extended import jwt_required

from dojo_manager import db
from dojo_manager.models.dojo import Dojo
from dojo_manager.utils.decorators import admin_required
from dojo_manager.utils.exceptions import ValidationError
from dojo_manager.utils.helpers import get_json_body, success_response
from dojo_manager.utils.validators import Validator

dojos_bp = Blueprint('dojos', __name__)

@dojos_bp.route('/', methods=['GET'])
@jwt_required()
def get_dojos():
    dojos = Dojo.query.order_by(Dojo.name).all()
    return success_response(data=[dojo.to_dict() for dojo in dojos])

@dojos_bp.route('/', methods=['POST'])
@jwt_required()
@admin_required
def create_dojo():
    """Create a training location."""
    data = get_json_body()
    Validator.require_fields(data, ['name'])

    email = (data.get('email') or '').strip().lower() or None
    if email and not Validator.validate_email(email):
        raise ValidationError("Invalid email format")

    primary_instructor_id = data.get('primary_instructor_id')
    if primary_instructor_id:
        primary_instructor_id = Validator.positive_int(primary_instructor_id, 'primary_instructor_id')

    dojo = Dojo(
        name=data['name'].strip(),
        address=(data.get('address') or '').strip() or None,
        phone=(data.get('phone') or '').strip() or None,
        email=email,
        primary_instructor_id=primary_instructor_id
    )
    db.session.add(dojo)
    db.session.commit()

    return success_response(data=dojo.to_dict(), message="Dojo created successfully"), 201
