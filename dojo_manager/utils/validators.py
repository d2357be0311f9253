"""Validation utilities for the application."""
import re
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Type

from dojo_manager.utils.exceptions import ValidationError

TIME_PATTERN = re.compile(r'^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$')

class Validator:
    """Validation helper class."""

    @staticmethod
    def validate_email(email: str) -> bool:
        """Validate email format."""
        if not email:
            return False
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        return bool(re.match(pattern, email))

    @staticmethod
    def validate_password(password: str) -> Dict:
        """Validate password strength."""
        errors = []

        if not password:
            errors.append("Password is required")
        elif len(password) < 6:
            errors.append("Password must be at least 6 characters long")
        elif len(password) > 128:
            errors.append("Password is too long")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }

    @staticmethod
    def validate_required_fields(data: Dict, required_fields: List[str]) -> Dict:
        """Validate required fields in data."""
        errors = []

        for field in required_fields:
            value = data.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                errors.append(f"{field} is required")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }

    @staticmethod
    def require_fields(data: Dict, required_fields: List[str]) -> None:
        """Raise ValidationError listing every missing required field."""
        validation = Validator.validate_required_fields(data, required_fields)
        if not validation['is_valid']:
            raise ValidationError(', '.join(validation['errors']))

    @staticmethod
    def positive_int(value, field: str) -> int:
        """Coerce to a strictly positive integer id."""
        if isinstance(value, bool):
            raise ValidationError(f"{field} must be a positive integer")
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{field} must be a positive integer")
        if number <= 0 or (isinstance(value, float) and value != number):
            raise ValidationError(f"{field} must be a positive integer")
        return number

    @staticmethod
    def number_in_range(value, field: str, minimum: float, maximum: float) -> float:
        """Coerce to a float inside [minimum, maximum]."""
        if isinstance(value, bool):
            raise ValidationError(f"{field} must be a number")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{field} must be a number")
        if not minimum <= number <= maximum:
            raise ValidationError(f"{field} must be between {minimum:g} and {maximum:g}")
        return number

    @staticmethod
    def enum_value(enum_cls: Type[Enum], value, field: str) -> Enum:
        """Resolve a lower-case enum value such as 'left_early'."""
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(str(value).strip().lower())
        except ValueError:
            allowed = ', '.join(member.value for member in enum_cls)
            raise ValidationError(f"{field} must be one of: {allowed}")

    @staticmethod
    def choice(value, field: str, allowed: Iterable[str]) -> str:
        allowed = tuple(allowed)
        if value not in allowed:
            raise ValidationError(f"{field} must be one of: {', '.join(allowed)}")
        return value

    @staticmethod
    def time_of_day(value, field: str) -> str:
        """Validate an HH:MM clock time."""
        if not isinstance(value, str) or not TIME_PATTERN.match(value):
            raise ValidationError(f"{field} must be in HH:MM format")
        return value

    @staticmethod
    def date_of_birth(value: Optional[date], today: date = None) -> Optional[date]:
        """Date of birth cannot be in the future nor more than 120 years ago."""
        if value is None:
            return None
        today = today or date.today()
        if value > today:
            raise ValidationError("Date of birth cannot be in the future")
        if today.year - value.year > 120:
            raise ValidationError("Please check the date of birth (age over 120)")
        return value
