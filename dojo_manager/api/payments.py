"""Payments API."""
import math

from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from dojo_manager import db
from dojo_manager.models.payment import PAYMENT_METHODS, PAYMENT_STATUSES, PAYMENT_TYPES, Payment
from dojo_manager.services.attendance_service import require_member
from dojo_manager.utils.decorators import instructor_required
from dojo_manager.utils.exceptions import ValidationError
from dojo_manager.utils.helpers import (
    get_json_body, get_pagination_args, pagination_meta, parse_date, success_response
)
from dojo_manager.utils.validators import Validator

payments_bp = Blueprint('payments', __name__)

@payments_bp.route('/', methods=['GET'])
@jwt_required()
def get_payments():
    """List payments, newest first."""
    page, per_page = get_pagination_args()
    query = Payment.query

    member_id = request.args.get('member_id')
    if member_id:
        query = query.filter(Payment.member_id == Validator.positive_int(member_id, 'member_id'))

    status = request.args.get('status')
    if status:
        query = query.filter(Payment.status == Validator.choice(status, 'status', PAYMENT_STATUSES))

    payment_type = request.args.get('payment_type')
    if payment_type:
        query = query.filter(Payment.payment_type == Validator.choice(payment_type, 'payment_type', PAYMENT_TYPES))

    pagination = query.order_by(Payment.payment_date.desc(), Payment.id.desc()).paginate(
        page=page, per_page=per_page, error_out=False
    )

    return success_response(
        data=[payment.to_dict() for payment in pagination.items],
        meta=pagination_meta(pagination)
    )

@payments_bp.route('/', methods=['POST'])
@jwt_required()
@instructor_required
def create_payment():
    data = get_json_body()
    Validator.require_fields(data, ['member_id', 'amount', 'payment_type'])

    member = require_member(data['member_id'])

    try:
        amount = round(float(data['amount']), 2)
    except (TypeError, ValueError):
        raise ValidationError("amount must be a number")
    if not math.isfinite(amount):
        raise ValidationError("amount must be a number")
    if amount <= 0:
        raise ValidationError("amount must be greater than 0")

    payment_method = data.get('payment_method')
    if payment_method:
        Validator.choice(payment_method, 'payment_method', PAYMENT_METHODS)

    payment = Payment(
        member_id=member.id,
        amount=amount,
        payment_type=Validator.choice(data['payment_type'], 'payment_type', PAYMENT_TYPES),
        payment_method=payment_method or None,
        status=Validator.choice(data.get('status') or 'pending', 'status', PAYMENT_STATUSES),
        due_date=parse_date(data.get('due_date'), 'due_date'),
        paid_date=parse_date(data.get('paid_date'), 'paid_date'),
        description=data.get('description')
    )
    db.session.add(payment)
    db.session.commit()

    current_app.logger.info('Payment %s of %.2f recorded for member %s', payment.id, amount, member.id)
    return success_response(data=payment.to_dict(), message="Payment recorded successfully"), 201
