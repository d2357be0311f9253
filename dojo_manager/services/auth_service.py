"""Authentication service for user management."""
from datetime import datetime
from typing import Dict, Optional, Tuple

from flask import current_app
from flask_jwt_extended import create_access_token, create_refresh_token
from sqlalchemy.exc import IntegrityError

from dojo_manager import db
from dojo_manager.models.user import User, UserRole
from dojo_manager.utils.validators import Validator

class AuthService:
    @staticmethod
    def _tokens(user: User) -> Dict:
        # JWT subjects must be strings
        identity = str(user.id)
        return {
            "access_token": create_access_token(identity=identity),
            "refresh_token": create_refresh_token(identity=identity),
            "user": user.to_dict()
        }

    @staticmethod
    def login(email: str, password: str) -> Tuple[Optional[Dict], Optional[str]]:
        """Authenticate user and return tokens."""
        if not email or not password:
            return None, "Email and password are required"

        if not Validator.validate_email(email.strip()):
            return None, "Invalid email format"

        user = User.query.filter_by(email=email.lower().strip()).first()
        if not user:
            return None, "Invalid email or password"

        if not user.check_password(password):
            user.failed_login_attempts = (user.failed_login_attempts or 0) + 1
            user.save()
            current_app.logger.warning('Failed login for %s', user.email)
            return None, "Invalid email or password"

        if not user.is_active:
            return None, "Account is deactivated"

        # Reset failed attempts and update last login
        user.failed_login_attempts = 0
        user.last_login = datetime.utcnow()
        user.save()

        return AuthService._tokens(user), None

    @staticmethod
    def register(email: str, password: str, role: str = 'member') -> Tuple[Optional[Dict], Optional[str]]:
        """Register new user."""
        if not email or not password:
            return None, "Email and password are required"

        email = email.lower().strip()
        if not Validator.validate_email(email):
            return None, "Invalid email format"

        password_check = Validator.validate_password(password)
        if not password_check['is_valid']:
            return None, password_check['errors'][0]

        try:
            user_role = UserRole((role or 'member').lower())
        except ValueError:
            return None, "Role must be one of: admin, instructor, member"

        if User.query.filter_by(email=email).first():
            return None, "Email already exists"

        user = User(email=email, role=user_role)
        user.set_password(password)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return None, "Email already exists"

        current_app.logger.info('Registered %s user %s', user_role.value, email)
        return user.to_dict(), None

    @staticmethod
    def get_user_by_id(user_id: int) -> Optional[User]:
        return db.session.get(User, user_id)

    @staticmethod
    def refresh_token(user_id: int) -> Tuple[Optional[Dict], Optional[str]]:
        """Generate new access token."""
        user = db.session.get(User, user_id)
        if not user or not user.is_active:
            return None, "User not found or inactive"

        return {
            "access_token": create_access_token(identity=str(user.id)),
            "user": user.to_dict()
        }, None
