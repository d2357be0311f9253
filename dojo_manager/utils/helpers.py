"""Helper functions for the application."""
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Tuple

from flask import current_app, jsonify, request

from dojo_manager.utils.exceptions import ValidationError

def handle_error(error, status_code: int):
    """Handle HTTP errors with consistent format."""
    kind = getattr(error, 'name', 'error').lower().replace(' ', '_')
    message = getattr(error, 'description', None) or str(error)
    return error_response(message, status_code, kind=kind)

def success_response(data: Any = None, message: str = "Success", meta: Dict = None):
    """Return consistent success response."""
    response = {
        'error': False,
        'message': message
    }

    if data is not None:
        response['data'] = data
    if meta is not None:
        response['meta'] = meta

    return jsonify(response)

def error_response(message: str, status_code: int = 400, kind: str = 'error'):
    """Return consistent error response."""
    return jsonify({
        'error': True,
        'kind': kind,
        'message': message,
        'status_code': status_code
    }), status_code

def get_json_body() -> Dict:
    """Return the JSON request body or raise a validation error."""
    data = request.get_json(silent=True)
    if data is None:
        raise ValidationError("Request body must be JSON")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data

def parse_date(value, field: str = 'date') -> Optional[date]:
    """Parse an ISO-8601 date; a full timestamp keeps only its date part."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        text = str(value)
        if len(text) > 10:
            return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid {field}. Use YYYY-MM-DD")

def parse_datetime(value, field: str = 'datetime') -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into a naive UTC datetime."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
        except ValueError:
            raise ValidationError(f"Invalid {field}. Use ISO format")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed

def get_pagination_args() -> Tuple[int, int]:
    """Read page/per_page query arguments, clamped to the configured maximum."""
    page = request.args.get('page', 1, type=int)
    per_page = request.args.get('per_page', current_app.config['DEFAULT_PAGE_SIZE'], type=int)

    page = max(page or 1, 1)
    per_page = min(max(per_page or 1, 1), current_app.config['MAX_PAGE_SIZE'])
    return page, per_page

def pagination_meta(pagination) -> Dict:
    return {
        'page': pagination.page,
        'per_page': pagination.per_page,
        'total': pagination.total,
        'pages': pagination.pages
    }
