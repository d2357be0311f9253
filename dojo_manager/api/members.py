"""Member management API."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from dojo_manager.models.member import MemberStatus
from dojo_manager.services.member_service import MemberService
from dojo_manager.utils.decorators import current_user_id, instructor_required
from dojo_manager.utils.helpers import (
    get_json_body, get_pagination_args, pagination_meta, success_response
)

members_bp = Blueprint('members', __name__)

@members_bp.route('/', methods=['GET'])
@jwt_required()
def get_members():
    """List members filtered by status and a name/email search."""
    page, per_page = get_pagination_args()

    pagination = MemberService.query(
        status=request.args.get('status'),
        search=request.args.get('search')
    ).paginate(page=page, per_page=per_page, error_out=False)

    return success_response(
        data=[member.to_dict() for member in pagination.items],
        meta=pagination_meta(pagination)
    )

@members_bp.route('/<int:member_id>', methods=['GET'])
@jwt_required()
def get_member(member_id):
    return success_response(data=MemberService.get(member_id).to_dict())

@members_bp.route('/', methods=['POST'])
@jwt_required()
@instructor_required
def create_member():
    member = MemberService.create(get_json_body())

    return success_response(
        data=member.to_dict(),
        message="Member created successfully"
    ), 201

@members_bp.route('/<int:member_id>', methods=['PUT'])
@jwt_required()
@instructor_required
def update_member(member_id):
    member = MemberService.update(member_id, get_json_body())

    return success_response(data=member.to_dict(), message="Member updated successfully")

@members_bp.route('/<int:member_id>', methods=['DELETE'])
@jwt_required()
@instructor_required
def deactivate_member(member_id):
    """Members are never removed, only deactivated."""
    member = MemberService.set_status(member_id, MemberStatus.INACTIVE)

    return success_response(data=member.to_dict(), message="Member deactivated successfully")

@members_bp.route('/<int:member_id>/reactivate', methods=['PATCH'])
@jwt_required()
@instructor_required
def reactivate_member(member_id):
    member = MemberService.set_status(member_id, MemberStatus.ACTIVE)

    return success_response(data=member.to_dict(), message="Member reactivated successfully")

@members_bp.route('/<int:member_id>/progress', methods=['GET'])
@jwt_required()
def get_member_progress(member_id):
    """Grading progress, optionally for a single target grade."""
    progress = MemberService.progress(member_id, request.args.get('target_grade_id'))

    return success_response(data=[item.to_dict() for item in progress])

@members_bp.route('/<int:member_id>/progress', methods=['POST'])
@jwt_required()
@instructor_required
def record_member_progress(member_id):
    progress = MemberService.record_progress(member_id, get_json_body(), current_user_id())

    return success_response(data=progress.to_dict(), message="Progress recorded")
