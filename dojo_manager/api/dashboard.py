"""Dashboard statistics API."""
from datetime import date

from flask import Blueprint
from flask_jwt_extended import jwt_required
from sqlalchemy import func

from dojo_manager import db
from dojo_manager.models.attendance import AttendanceRecord
from dojo_manager.models.member import Member
from dojo_manager.models.payment import Payment
from dojo_manager.utils.helpers import success_response

dashboard_bp = Blueprint('dashboard', __name__)

def month_bounds(today: date):
    start = today.replace(day=1)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end

def collect_stats(today: date = None) -> dict:
    """Membership, attendance and payment figures for the current month."""
    today = today or date.today()
    start, end = month_bounds(today)

    member_counts = db.session.query(Member.status, func.count(Member.id)).group_by(Member.status).all()

    attendance_this_month = AttendanceRecord.query.filter(
        AttendanceRecord.date >= start,
        AttendanceRecord.date < end
    ).count()

    overdue_payments = Payment.query.filter(
        Payment.status == 'pending',
        Payment.due_date < today
    ).count()

    revenue = db.session.query(func.coalesce(func.sum(Payment.amount), 0)).filter(
        Payment.status == 'completed',
        Payment.paid_date >= start,
        Payment.paid_date < end
    ).scalar()

    return {
        'members': {status.value: count for status, count in member_counts},
        'attendance_this_month': attendance_this_month,
        'overdue_payments': overdue_payments,
        'revenue_this_month': float(revenue or 0)
    }

@dashboard_bp.route('/stats', methods=['GET'])
@jwt_required()
def get_stats():
    return success_response(data=collect_stats())
