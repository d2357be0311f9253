"""Domain errors surfaced to API clients.

Every error carries a stable machine-readable ``kind``, a human readable
``message`` and the HTTP status used when it reaches the request boundary.
"""

class DojoError(Exception):
    """Base class for all client-visible domain errors."""

    kind = 'error'
    status_code = 400
    default_message = 'Request could not be processed'

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

class ValidationError(DojoError):
    """Malformed or out-of-range input."""
    kind = 'validation_error'
    default_message = 'Validation failed'

class NotFound(DojoError):
    """Generic missing resource."""
    kind = 'not_found'
    status_code = 404
    default_message = 'Resource not found'

class DuplicateRecord(DojoError):
    kind = 'duplicate_record'
    default_message = 'Attendance already recorded for this member on this date'

class MissingReason(DojoError):
    kind = 'missing_reason'
    default_message = 'An adjustment reason is required'

class RecordNotFound(NotFound):
    kind = 'record_not_found'
    default_message = 'Attendance record not found'

class SessionNotFound(NotFound):
    kind = 'session_not_found'
    default_message = 'Session not found'

class SessionNotActive(DojoError):
    kind = 'session_not_active'
    default_message = 'Session is not active'

class AlreadyCheckedIn(DojoError):
    kind = 'already_checked_in'
    default_message = 'Member already checked in'

class NotCheckedIn(DojoError):
    kind = 'not_checked_in'
    default_message = 'Member not checked in or already checked out'

class InvalidClass(DojoError):
    kind = 'invalid_class'
    default_message = 'Class does not exist'

# Raised when resolving a class duration for a new record
UnknownClass = InvalidClass
