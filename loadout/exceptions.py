"""
Loadout Exceptions

Error taxonomy shared by the services and the HTTP layer. Lookups that
find nothing return None; NotFoundError is reserved for callers that
need to report absence to the user.
"""

from typing import Optional, Dict, Any


class LoadoutError(Exception):
    """Base exception for loadout errors."""

    def __init__(
        self,
        message: str,
        code: str = 'LOADOUT_ERROR',
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            'error': self.code,
            'message': self.message,
            'details': self.details,
        }


class ValidationError(LoadoutError):
    """Raised when input is rejected before any storage call."""

    def __init__(
        self,
        message: str,
        field: str = None,
        details: Optional[Dict[str, Any]] = None,
        code: str = 'VALIDATION_ERROR',
    ):
        error_details = details or {}
        if field:
            error_details['field'] = field
        self.field = field
        super().__init__(
            message=message,
            code=code,
            details=error_details
        )


class AssignmentError(ValidationError):
    """Raised when a position assignment breaks a hardpoint rule."""

    def __init__(
        self,
        message: str,
        position: str = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if position:
            error_details['position'] = position
        super().__init__(
            message=message,
            details=error_details,
            code='ASSIGNMENT_ERROR',
        )


class NotFoundError(LoadoutError):
    """Raised when a caller needs absence reported to the user."""

    def __init__(
        self,
        entity: str,
        key: Any = None,
        message: str = None,
        details: Optional[Dict[str, Any]] = None
    ):
        msg = message or f'{entity} not found: {key}'
        error_details = details or {}
        error_details.update({'entity': entity, 'key': key})
        super().__init__(
            message=msg,
            code='NOT_FOUND',
            details=error_details
        )


class ConflictError(LoadoutError):
    """Raised when a key already exists or a row is still referenced."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code='CONFLICT',
            details=details
        )


class FiringStateError(LoadoutError):
    """Raised when a fired/aboard transition is invalid."""

    def __init__(
        self,
        message: str,
        position: str = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if position:
            error_details['position'] = position
        super().__init__(
            message=message,
            code='FIRING_STATE_ERROR',
            details=error_details
        )


class PersistenceError(LoadoutError):
    """Raised when a storage transaction fails and has been rolled back."""

    def __init__(
        self,
        operation: str,
        cause: Exception = None,
        details: Optional[Dict[str, Any]] = None
    ):
        reason = str(cause) if cause is not None else 'unknown error'
        error_details = details or {}
        error_details.update({'operation': operation, 'cause': reason})
        self.operation = operation
        self.cause = cause
        super().__init__(
            message=f'{operation} failed: {reason}',
            code='PERSISTENCE_ERROR',
            details=error_details
        )
