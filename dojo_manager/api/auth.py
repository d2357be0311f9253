"""Authentication API."""
from flask import Blueprint
from flask_jwt_extended import jwt_required

from dojo_manager import limiter
from dojo_manager.services.auth_service import AuthService
from dojo_manager.utils.decorators import current_user_id
from dojo_manager.utils.helpers import error_response, get_json_body, success_response

auth_bp = Blueprint("auth", __name__)

@auth_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    return success_response(message="Auth service is running")

@auth_bp.route("/login", methods=["POST"])
@limiter.limit("5 per minute")
def login():
    """Staff and member login."""
    data = get_json_body()

    email = (data.get("email") or "").strip()
    password = data.get("password") or ""

    if not email or not password:
        return error_response("Email and password are required", 400, kind='validation_error')

    result, error = AuthService.login(email, password)
    if error:
        return error_response(error, 401, kind='invalid_credentials')

    return success_response(data=result, message="Login successful")

@auth_bp.route("/register", methods=["POST"])
@limiter.limit("10 per hour")
def register():
    """Create a login account."""
    data = get_json_body()

    user, error = AuthService.register(
        email=data.get("email"),
        password=data.get("password"),
        role=data.get("role", "member")
    )
    if error:
        return error_response(error, 400, kind='validation_error')

    return success_response(data=user, message="User registered successfully"), 201

@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def get_current_user():
    """Get current user profile."""
    user = AuthService.get_user_by_id(current_user_id())

    if not user:
        return error_response("User not found", 404, kind='user_not_found')

    return success_response(data=user.to_dict())

@auth_bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh_token():
    """Refresh access token."""
    result, error = AuthService.refresh_token(current_user_id())
    if error:
        return error_response(error, 401, kind='invalid_token')

    return success_response(data=result, message="Token refreshed successfully")
