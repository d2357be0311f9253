"""Custom decorators for authorization."""
from functools import wraps
from flask_jwt_extended import get_jwt_identity
from dojo_manager import db
from dojo_manager.models.user import User, UserRole
from dojo_manager.utils.helpers import error_response

def current_user_id() -> int:
    """Return the id of the user owning the current access token."""
    return int(get_jwt_identity())

def _load_current_user():
    return db.session.get(User, current_user_id())

def roles_required(*roles: UserRole, message: str = "Insufficient permissions"):
    """Decorator factory restricting an endpoint to the given roles."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = _load_current_user()

            if not user or not user.is_active:
                return error_response("User not found", 404, kind='user_not_found')

            if user.role not in roles:
                return error_response(message, 403, kind='forbidden')

            return f(*args, **kwargs)
        return decorated_function
    return decorator

def admin_required(f):
    """Decorator to require admin role."""
    return roles_required(UserRole.ADMIN, message="Admin access required")(f)

def instructor_required(f):
    """Decorator to require instructor role or higher."""
    return roles_required(
        UserRole.ADMIN, UserRole.INSTRUCTOR,
        message="Instructor access required"
    )(f)
