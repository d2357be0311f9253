"""Attendance API: records, backdating, adjustments and live sessions."""
from datetime import date

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from dojo_manager.services.attendance_service import AttendanceService
from dojo_manager.services.live_session_service import LiveSessionService
from dojo_manager.services.session_finalizer import SessionFinalizer
from dojo_manager.utils.decorators import current_user_id, instructor_required
from dojo_manager.utils.exceptions import ValidationError
from dojo_manager.utils.helpers import (
    get_json_body, get_pagination_args, pagination_meta, parse_date, success_response
)
from dojo_manager.utils.validators import Validator

attendance_bp = Blueprint('attendance', __name__)

FILTER_ARGS = ('member_id', 'class_id', 'date_from', 'date_to', 'status', 'attendance_type')
LIVE_ACTIONS = ('check_in', 'check_out')

def history_filters():
    return {name: request.args.get(name) for name in FILTER_ARGS}

# Records

@attendance_bp.route('/', methods=['GET'])
@jwt_required()
def get_attendance():
    """Attendance history, newest first."""
    page, per_page = get_pagination_args()
    pagination = AttendanceService.paginate(history_filters(), page=page, per_page=per_page)

    return success_response(
        data=[record.to_dict() for record in pagination.items],
        meta=pagination_meta(pagination)
    )

@attendance_bp.route('/', methods=['POST'])
@jwt_required()
@instructor_required
def create_attendance():
    data = get_json_body()
    Validator.require_fields(data, ['member_id', 'class_id'])

    record = AttendanceService.create_regular(
        member_id=data['member_id'],
        class_id=data['class_id'],
        attendance_date=data.get('date') or date.today(),
        status=data.get('status') or 'present',
        hours_attended=data.get('hours_attended'),
        notes=data.get('notes')
    )

    return success_response(data=record.to_dict(), message="Attendance recorded"), 201

@attendance_bp.route('/backdate', methods=['POST'])
@jwt_required()
@instructor_required
def backdate_attendance():
    """Record attendance for a past class; a justification is mandatory."""
    data = get_json_body()
    Validator.require_fields(data, ['member_id', 'class_id', 'date'])

    record = AttendanceService.create_backdated(
        member_id=data['member_id'],
        class_id=data['class_id'],
        attendance_date=data['date'],
        status=data.get('status'),
        adjustment_reason=data.get('adjustment_reason'),
        adjusted_by=current_user_id(),
        hours_attended=data.get('hours_attended'),
        check_in_time=data.get('check_in_time'),
        check_out_time=data.get('check_out_time'),
        notes=data.get('notes')
    )

    return success_response(data=record.to_dict(), message="Backdated attendance recorded"), 201

@attendance_bp.route('/export', methods=['GET'])
@jwt_required()
def export_attendance():
    """Filtered history as a CSV download."""
    csv_data = AttendanceService.export_csv(history_filters())

    return csv_data, 200, {
        'Content-Type': 'text/csv; charset=utf-8',
        'Content-Disposition': f'attachment; filename=attendance_{date.today().isoformat()}.csv'
    }

@attendance_bp.route('/<int:record_id>', methods=['GET'])
@jwt_required()
def get_attendance_record(record_id):
    return success_response(data=AttendanceService.get(record_id).to_dict())

@attendance_bp.route('/<int:record_id>', methods=['PUT'])
@jwt_required()
@instructor_required
def adjust_attendance(record_id):
    data = get_json_body()

    record = AttendanceService.adjust(
        record_id,
        adjustment_reason=data.get('adjustment_reason'),
        adjusted_by=current_user_id(),
        status=data.get('status'),
        hours_attended=data.get('hours_attended'),
        check_in_time=data.get('check_in_time'),
        check_out_time=data.get('check_out_time'),
        notes=data.get('notes')
    )

    return success_response(data=record.to_dict(), message="Attendance adjusted")

@attendance_bp.route('/class/<int:class_id>/date/<attendance_date>', methods=['GET'])
@jwt_required()
def get_class_roster(class_id, attendance_date):
    records = AttendanceService.class_roster(class_id, parse_date(attendance_date))
    return success_response(data=[record.to_dict() for record in records])

# Live sessions

@attendance_bp.route('/sessions', methods=['POST'])
@jwt_required()
@instructor_required
def start_session():
    data = get_json_body()
    Validator.require_fields(data, ['class_id'])

    session = LiveSessionService.start(
        class_id=data['class_id'],
        session_date=data.get('date') or date.today(),
        instructor_id=current_user_id(),
        notes=data.get('notes')
    )

    return success_response(data=session.to_dict(), message="Session started"), 201

@attendance_bp.route('/sessions/<int:session_id>', methods=['GET'])
@jwt_required()
def get_session(session_id):
    return success_response(data=LiveSessionService.get(session_id).to_dict())

@attendance_bp.route('/sessions/<int:session_id>/live', methods=['GET'])
@jwt_required()
def get_live_entries(session_id):
    """Who is on the mat right now and who has left."""
    entries = LiveSessionService.list_live(session_id)

    return success_response(data={
        'checked_in': [entry.to_dict() for entry in entries['checked_in']],
        'checked_out': [entry.to_dict() for entry in entries['checked_out']]
    })

@attendance_bp.route('/live', methods=['POST'])
@jwt_required()
@instructor_required
def live_check():
    data = get_json_body()
    Validator.require_fields(data, ['session_id', 'member_id', 'action'])
    action = data['action']

    if action == 'check_in':
        entry = LiveSessionService.check_in(data['session_id'], data['member_id'])
        return success_response(data=entry.to_dict(), message="Member checked in"), 201
    if action == 'check_out':
        entry = LiveSessionService.check_out(data['session_id'], data['member_id'])
        return success_response(data=entry.to_dict(), message="Member checked out")

    raise ValidationError(f"action must be one of: {', '.join(LIVE_ACTIONS)}")

@attendance_bp.route('/sessions/<int:session_id>/end', methods=['PUT'])
@jwt_required()
@instructor_required
def end_session(session_id):
    session = LiveSessionService.end(session_id)
    return success_response(data=session.to_dict(), message="Session ended")

@attendance_bp.route('/sessions/<int:session_id>/finalize', methods=['POST'])
@jwt_required()
@instructor_required
def finalize_session(session_id):
    """Promote live check-ins into attendance records."""
    summary = SessionFinalizer.finalize(session_id)

    message = f"{summary['records_processed']} attendance records created"
    if summary['failed']:
        message += f", {summary['failed']} failed"
    return success_response(data=summary, message=message)
