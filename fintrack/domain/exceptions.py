"""Domain-specific exceptions"""

from typing import List, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.details = list(details or [])
        super().__init__(self.message)

    @property
    def status(self) -> str:
        """'fail' for client errors, 'error' for server errors"""
        return "fail" if 400 <= self.status_code < 500 else "error"


class ValidationError(DomainException):
    """Input is malformed or out of range"""

    status_code = 400
    default_message = "Validation failed"


class NotFoundError(DomainException):
    """Resource is absent or not owned by the caller"""

    status_code = 404
    default_message = "Resource not found"


class ConflictError(DomainException):
    """Operation conflicts with the current state of the resource"""

    status_code = 409
    default_message = "Conflict"
